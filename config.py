import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

class Config:
    """기본 설정 (모든 환경 공통)"""
    SECRET_KEY = os.environ.get('SECRET_KEY')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # 환경변수 DATABASE_URL이 있으면 사용, 없으면 로컬 SQLite
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f"sqlite:///{os.path.join(BASE_DIR, 'workcalendar.db')}"
    )
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # JSON API 전용

    # 일괄 등록 API 호출 제한 (Flask-Limiter)
    RATELIMIT_ENABLED = os.environ.get('RATELIMIT_ENABLED', 'true').lower() != 'false'
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # ── 근태/급여 정책 (CLT 기준) ──
    REFERENCE_TIMEZONE = os.environ.get('REFERENCE_TIMEZONE', 'America/Sao_Paulo')
    MONTHLY_STANDARD_HOURS = 220         # 월 소정근로시간 (시급 = 월 보수 / 220)
    # 요일별 기본 근무시간 (0=일요일 ... 6=토요일)
    # 일요일은 전부 100% 가산, 토요일은 기준 없이 전부 50% 가산
    EXPECTED_DAILY_HOURS = {
        1: 9.0,  # 월
        2: 9.0,  # 화
        3: 9.0,  # 수
        4: 9.0,  # 목
        5: 8.0,  # 금
        6: 0.0,  # 토
    }
    LATE_NIGHT_START_HOUR = 22           # 22시 이후 근무는 100% 가산
    OVERTIME_50_FACTOR = 1.5
    OVERTIME_100_FACTOR = 2.0

    # 근무 거점(polo) → 주(UF) 코드. 부분 일치, 대소문자/악센트 무시
    # 매핑되지 않는 거점은 전국 공휴일만 적용
    WORK_HUB_STATES = {
        'BRASILIA': 'DF',
        'GOIAS': 'GO',
    }

    # 로깅 설정
    @staticmethod
    def get_logging_config(log_dir):
        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': '[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
                }
            },
            'handlers': {
                'file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'filename': os.path.join(log_dir, 'workcalendar.log'),
                    'maxBytes': 1024 * 1024 * 10, # 10MB
                    'backupCount': 5,
                    'formatter': 'default',
                    'encoding': 'utf-8'
                },
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'default'
                }
            },
            'root': {
                'level': os.environ.get('LOG_LEVEL', 'INFO'),
                'handlers': ['file', 'console']
            }
        }

class DevelopmentConfig(Config):
    """개발 환경 설정"""
    DEBUG = True

class ProductionConfig(Config):
    """운영 환경 설정"""
    DEBUG = False

    # 운영 환경 필수값 검증
    def __init__(self):
        if not self.SECRET_KEY:
            raise RuntimeError("SECRET_KEY environment variable is not set")

# 환경 변수에 따라 설정 클래스 선택
config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
