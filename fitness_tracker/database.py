from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    pass


def _on_sqlite_connect(dbapi_conn, _record):
    # 드라이버 자체의 암묵적 BEGIN 을 끄고 트랜잭션 시작은 _on_begin 에서 직접 처리
    dbapi_conn.isolation_level = None
    # sqlite 는 연결마다 FK 강제를 켜야 ON DELETE CASCADE 가 동작함
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_begin(conn):
    # DDL / SELECT 까지 같은 트랜잭션에 포함
    conn.exec_driver_sql("BEGIN")


def make_engine(db_url: str) -> Engine:
    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        connect_args["isolation_level"] = None
    engine = create_engine(db_url, future=True, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _on_sqlite_connect)
        event.listen(engine, "begin", _on_begin)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
