"""
PRESENTATION LAYER - HTTP and WebSocket surface

- api/          → FastAPI routers (users, messages, realtime, metrics)
- dependencies/ → Auth dependency shared by REST and the WebSocket handshake
"""
