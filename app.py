import os
from flask import Flask, jsonify
from dotenv import load_dotenv
from flask_migrate import Migrate
from models import db
from extensions import limiter

# .env 파일에서 환경변수 로드
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(BASE_DIR, '.env'))

from config import config_by_name

app = Flask(__name__)

# 환경 설정 적용 (기본값 production)
env_name = os.environ.get('FLASK_ENV', 'production')
app_config = config_by_name[env_name]()
app.config.from_object(app_config)

# 로깅 설정 적용
LOG_DIR = os.path.join(BASE_DIR, 'logs')
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

from logging.config import dictConfig
dictConfig(app_config.get_logging_config(LOG_DIR))

# 초기화
db.init_app(app)
migrate = Migrate(app, db)
limiter.init_app(app)

# Blueprint 중앙 등록
from routes import register_blueprints
register_blueprints(app)

@app.route('/health')
def health():
    try:
        db.session.execute(db.text('SELECT 1'))
        return jsonify({"status": "healthy", "database": "connected"}), 200
    except Exception as e:
        return jsonify({"status": "unhealthy", "database": str(e)}), 503

@app.after_request
def set_security_headers(response):
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    return response


@app.errorhandler(404)
def page_not_found(e):
    return jsonify({"error": "요청하신 주소를 찾을 수 없습니다."}), 404

@app.errorhandler(500)
def internal_server_error(e):
    import logging
    logging.getLogger(__name__).exception("500 Internal Server Error: %s", e)
    return jsonify({"error": "서버 내부 오류. 잠시 후 다시 시도해주세요."}), 500


if __name__ == '__main__':
    use_debug = os.environ.get('FLASK_DEBUG', '0') == '1'
    app.run(host='127.0.0.1', port=5000, debug=use_debug)
