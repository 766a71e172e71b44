from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# 앱 초기화는 app.py에서 limiter.init_app(app)
limiter = Limiter(key_func=get_remote_address)
