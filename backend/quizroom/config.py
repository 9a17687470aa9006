import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list of allowed origins for HTTP and Socket.IO
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    # Room codes are truncated uuid4 hex; 8 chars gives 2^32 codes
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '8'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Optional: heartbeat interval for session timer logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
