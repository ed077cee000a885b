"""
Client-side orchestration of remote agents.

- client: HTTP client for the remote thread/message/run API
- orchestrator: append-and-run protocol bound to one agent id
- reconcile: ordering and merging of message histories
- exceptions: failure taxonomy shared by the layers above
"""
