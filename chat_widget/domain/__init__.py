"""领域层模型与协议。

包含：
- models: ChatMessage / ChatRequestBody / AgentReply 等数据模型。
- state: 会话状态 ConversationState 及其纯函数式变换。
- texts: 面向用户的固定文案。
- exceptions: 业务异常类型定义。
"""
