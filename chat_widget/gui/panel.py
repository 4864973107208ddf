import asyncio
import tkinter as tk
from tkinter import scrolledtext

from chat_widget.api.service import get_default_controller
from chat_widget.domain import texts
from chat_widget.domain.state import ConversationState
from chat_widget.gui.view_model import (
    can_send,
    header_subtitle,
    render_lines,
    send_button_label,
    session_badge,
)
from chat_widget.widget.controller import ChatController

SHIFT_MASK = 0x0001


class ChatPanelApp:
    """悬浮按钮 + 聊天面板。

    Tk 的事件循环由 asyncio 任务定期驱动（run），所有状态变更都发生在同一线程上。
    """

    def __init__(self, root: tk.Tk, controller: ChatController):
        self.root = root
        self.controller = controller
        self.root.title(texts.PANEL_TITLE)
        self._running = True
        self._tasks: set[asyncio.Task] = set()
        self._rendered_messages = None

        self.panel = tk.Frame(root)
        header = tk.Frame(self.panel)
        header.pack(fill=tk.X)
        titles = tk.Frame(header)
        titles.pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Label(titles, text=texts.PANEL_TITLE, font=("TkDefaultFont", 11, "bold")).pack(anchor=tk.W)
        self.subtitle = tk.Label(titles, text="")
        self.subtitle.pack(anchor=tk.W)
        self.badge = tk.Label(titles, text="", foreground="#5f6368")
        self.badge.pack(anchor=tk.W)
        tk.Button(header, text="×", command=lambda: self.controller.set_open(False)).pack(side=tk.RIGHT)

        self.chat = scrolledtext.ScrolledText(self.panel, width=60, height=18, wrap=tk.WORD)
        self.chat.pack(fill=tk.BOTH, expand=True)
        self.chat.tag_config("user", foreground="#1a73e8")
        self.chat.tag_config("agent", foreground="#34a853")
        self.chat.tag_config("typing", foreground="#5f6368")
        self.chat.tag_config("fallback", foreground="#5f6368")
        self.chat.tag_config("error", foreground="#d93025")

        footer = tk.Frame(self.panel)
        footer.pack(fill=tk.X)
        self.error_label = tk.Label(footer, text="", foreground="#d93025")
        self.error_label.pack(fill=tk.X)
        row = tk.Frame(footer)
        row.pack(fill=tk.X)
        self.entry = tk.Text(row, height=3, wrap=tk.WORD)
        self.entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.entry.bind("<Return>", self.on_return)
        self.entry.bind("<KeyRelease>", self.on_input_changed)
        self.send_btn = tk.Button(row, text=texts.SEND_LABEL, command=self.on_send)
        self.send_btn.pack(side=tk.LEFT)
        tk.Label(footer, text=texts.ENDPOINT_HINT, foreground="#5f6368").pack(fill=tk.X)

        self.bubble = tk.Button(root, text="💬", command=self.controller.toggle_open)
        self.bubble.pack(side=tk.BOTTOM, anchor=tk.E)

        self._unsubscribe = controller.subscribe(self.render)
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self.render(controller.state)

    # ---- events -------------------------------------------------------

    def on_return(self, event):
        if event.state & SHIFT_MASK:
            return None
        self.on_send()
        return "break"

    def on_input_changed(self, event=None):
        text = self.entry.get("1.0", "end-1c")
        if text != self.controller.state.draft:
            self.controller.set_draft(text)

    def on_send(self):
        self.on_input_changed()
        if not can_send(self.controller.state):
            return
        task = asyncio.get_running_loop().create_task(self.controller.submit())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ---- rendering ----------------------------------------------------

    def render(self, state: ConversationState) -> None:
        if state.is_open:
            if not self.panel.winfo_ismapped():
                self.panel.pack(side=tk.TOP, fill=tk.BOTH, expand=True, before=self.bubble)
        else:
            self.panel.pack_forget()

        self.subtitle.config(text=header_subtitle(state))
        self.badge.config(text=session_badge(state))
        self.error_label.config(text=state.last_error)

        if state.messages is not self._rendered_messages:
            self._rendered_messages = state.messages
            self.chat.config(state=tk.NORMAL)
            self.chat.delete("1.0", tk.END)
            for line in render_lines(state):
                self.chat.insert(tk.END, f"{line.avatar}: {line.text}\n", line.tag)
            self.chat.config(state=tk.DISABLED)
            self.chat.see(tk.END)

        self.entry.config(state=tk.NORMAL)
        if self.entry.get("1.0", "end-1c") != state.draft:
            self.entry.delete("1.0", tk.END)
            self.entry.insert("1.0", state.draft)
        self.entry.config(state=tk.DISABLED if state.is_sending else tk.NORMAL)
        self.send_btn.config(
            text=send_button_label(state),
            state=tk.NORMAL if can_send(state) else tk.DISABLED,
        )

    # ---- lifecycle ----------------------------------------------------

    async def run(self, interval: float = 0.02) -> None:
        while self._running:
            self.root.update()
            await asyncio.sleep(interval)
        # 在途请求照常跑完，结果仍写回历史
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def close(self) -> None:
        self._running = False
        self._unsubscribe()
        self.root.destroy()


async def _run(controller: ChatController) -> None:
    root = tk.Tk()
    app = ChatPanelApp(root, controller)
    await app.run()


def main() -> None:
    asyncio.run(_run(get_default_controller()))


if __name__ == "__main__":
    main()
