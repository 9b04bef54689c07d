"""Tests for the database URL and the table schema built from the configuration."""
import pytest
from sqlalchemy import create_engine, inspect, select
from sqlalchemy.ext.asyncio import create_async_engine

from database import create_session_factory, database_url
from main import create_tables
from models import build_metadata, logical_tables
from settings import TABLE_NAMES


@pytest.mark.parametrize('database_type,driver', [
    ('mysql', 'mysql+aiomysql'),
    ('mysqli', 'mysql+aiomysql'),
    ('pgsql', 'postgresql+asyncpg'),
])
def test_driver_follows_database_type(make_config, database_type, driver):
    url = database_url(make_config(database_type=database_type))
    assert url.drivername == driver


def test_connection_parameters(make_config):
    config = make_config(
        database_host='db.example.org',
        database_user='mailadmin',
        database_password='s3cret',
        database_name='mail',
    )
    url = database_url(config)
    assert url.host == 'db.example.org'
    assert url.username == 'mailadmin'
    assert url.password == 's3cret'
    assert url.database == 'mail'
    assert 's3cret' not in url.render_as_string(hide_password=True)


def test_empty_password_is_omitted(make_config):
    assert database_url(make_config(database_password='')).password is None


def test_tables_use_physical_names(make_config):
    config = make_config(database_prefix='pfa_', database_tables={'mailbox': 'users'})
    metadata = build_metadata(config)
    assert set(metadata.tables) == {config.table(name) for name in TABLE_NAMES}
    assert 'pfa_users' in metadata.tables

    tables = logical_tables(metadata, config)
    assert list(tables) == list(TABLE_NAMES)
    assert tables['mailbox'].name == 'pfa_users'


def test_vacation_notification_references_renamed_vacation(make_config):
    config = make_config(database_tables={'vacation': 'away'})
    tables = logical_tables(build_metadata(config), config)
    (fk,) = tables['vacation_notification'].c.on_vacation.foreign_keys
    assert fk.target_fullname == 'away.email'


def test_domain_defaults_come_from_config(make_config):
    config = make_config(aliases=50, mailboxes=20, maxquota=100, transport_default='relay')
    domain = logical_tables(build_metadata(config), config)['domain']
    assert domain.c.aliases.default.arg == 50
    assert domain.c.mailboxes.default.arg == 20
    assert domain.c.maxquota.default.arg == 100
    assert domain.c.transport.default.arg == 'relay'


def test_schema_can_be_created(make_config):
    config = make_config(database_prefix='pfa_')
    metadata = build_metadata(config)
    engine = create_engine('sqlite://')
    metadata.create_all(engine)
    assert set(inspect(engine).get_table_names()) == set(metadata.tables)
    engine.dispose()


async def test_create_tables_and_insert_with_defaults(make_config, tmp_path):
    config = make_config(database_prefix='pfa_', aliases=25)
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'mail.db'}")
    await create_tables(config, engine)

    domain = logical_tables(build_metadata(config), config)['domain']
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        await session.execute(domain.insert().values(domain='example.org'))
        await session.commit()
        row = (await session.execute(select(domain.c.aliases, domain.c.transport))).one()

    assert row.aliases == 25
    assert row.transport == 'virtual'
    await engine.dispose()
