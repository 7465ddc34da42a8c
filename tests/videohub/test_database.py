from sqlalchemy import create_engine, inspect, text

import videohub.database as database


def test_ensure_user_schema_adds_missing_columns(tmp_path, monkeypatch) -> None:
    legacy_engine = create_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    with legacy_engine.begin() as connection:
        connection.execute(
            text(
                'CREATE TABLE users (id INTEGER PRIMARY KEY, username VARCHAR, email VARCHAR, '
                'full_name VARCHAR, avatar VARCHAR, password VARCHAR)'
            )
        )
    monkeypatch.setattr(database, 'engine', legacy_engine)
    monkeypatch.setattr(database, '_user_schema_checked', False)

    database.ensure_user_schema()

    columns = {column['name'] for column in inspect(legacy_engine).get_columns('users')}
    indexes = {index['name'] for index in inspect(legacy_engine).get_indexes('users')}
    assert {'cover_image', 'refresh_token', 'updated_at'} <= columns
    assert 'ix_users_full_name' in indexes


def test_ensure_user_schema_skips_missing_table(tmp_path, monkeypatch) -> None:
    empty_engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    monkeypatch.setattr(database, 'engine', empty_engine)
    monkeypatch.setattr(database, '_user_schema_checked', False)

    database.ensure_user_schema()

    assert inspect(empty_engine).get_table_names() == []


def test_ensure_user_schema_does_not_duplicate_model_indexes(tmp_path, monkeypatch) -> None:
    from videohub.models.user import User

    fresh_engine = create_engine(f"sqlite:///{tmp_path / 'fresh.db'}")
    database.Base.metadata.create_all(bind=fresh_engine, tables=[User.__table__])
    monkeypatch.setattr(database, 'engine', fresh_engine)
    monkeypatch.setattr(database, '_user_schema_checked', False)

    database.ensure_user_schema()

    full_name_indexes = [
        index['name']
        for index in inspect(fresh_engine).get_indexes('users')
        if index['column_names'] == ['full_name']
    ]
    assert full_name_indexes == ['ix_users_full_name']
