"""Alembic 환경. Flask-Migrate 가 관리하는 앱의 db 메타데이터를 사용한다.

holidays.date 는 DATE, time_records.timestamp 는 naive UTC DATETIME 이라
컬럼 타입 변경도 autogenerate 에서 감지하도록 compare_type 을 켠다.
"""
import logging
from logging.config import fileConfig

from alembic import context
from flask import current_app

config = context.config
fileConfig(config.config_file_name)
logger = logging.getLogger('alembic.env')


def get_engine():
    return current_app.extensions['migrate'].db.engine


def get_engine_url():
    return get_engine().url.render_as_string(hide_password=False).replace('%', '%%')


config.set_main_option('sqlalchemy.url', get_engine_url())
target_db = current_app.extensions['migrate'].db


def _is_sqlite():
    return get_engine().dialect.name == 'sqlite'


def run_migrations_offline():
    context.configure(
        url=config.get_main_option('sqlalchemy.url'),
        target_metadata=target_db.metadata,
        literal_binds=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    # 스키마 변경이 없으면 빈 마이그레이션 파일을 만들지 않는다
    def process_revision_directives(context, revision, directives):
        if getattr(config.cmd_opts, 'autogenerate', False):
            script = directives[0]
            if script.upgrade_ops.is_empty():
                directives[:] = []
                logger.info('스키마 변경 없음, 마이그레이션 생성 생략')

    conf_args = dict(current_app.extensions['migrate'].configure_args)
    conf_args.setdefault('process_revision_directives', process_revision_directives)
    conf_args.setdefault('compare_type', True)
    # SQLite 는 ALTER 제약이 있어 batch 모드로 테이블을 재생성한다
    conf_args.setdefault('render_as_batch', _is_sqlite())

    with get_engine().connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_db.metadata,
            **conf_args
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
