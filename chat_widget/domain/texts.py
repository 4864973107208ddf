"""面向用户的固定文案（西班牙语，与线上挂件保持一致）。"""

GREETING_ID = "intro"
GREETING_TEXT = (
    "¡Hola! Soy el asistente de PrimeCars. "
    "Pregúntame por ofertas, reservas o información de la plataforma."
)

TYPING_TEXT = "Escribiendo…"

FALLBACK_MESSAGE = (
    "Lo siento, no he podido recuperar la respuesta ahora mismo. "
    "Por favor, inténtalo de nuevo o comparte más detalles."
)

# 非 2xx 响应
ERROR_AGENT_UNREACHABLE = "No se pudo contactar con el agente."
# 异常本身没有可读信息时使用
ERROR_GENERIC = "Se produjo un error al enviar tu mensaje."

# ---- 展示层文案 ----
PANEL_TITLE = "Asistente PrimeCars"
SUBTITLE_STATELESS = "Modo sin estado"
SUBTITLE_STATEFUL = "Sesión activa para tu conversación"
INPUT_PLACEHOLDER = "Escribe tu mensaje..."
SEND_LABEL = "Enviar"
SENDING_LABEL = "Enviando…"
OPEN_CHAT_LABEL = "Abrir chat PrimeCars"
CLOSE_CHAT_LABEL = "Cerrar chat"
ENDPOINT_HINT = "Sin claves internas: la integración usa únicamente el endpoint público del agente."
AVATAR_AGENT = "PC"
AVATAR_USER = "Tú"
