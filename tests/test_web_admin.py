"""Tests for the admin web application."""
from web_admin import create_app


async def test_setup_check(aiohttp_client, make_config):
    config = make_config(database_prefix='pfa_', database_password='hunter2', vacation='YES')
    client = await aiohttp_client(create_app(config))

    resp = await client.get('/admin/setup')
    assert resp.status == 200
    data = await resp.json()

    assert data['configured'] is True
    assert data['database']['type'] == 'mysql'
    assert data['database']['tables']['mailbox'] == 'pfa_mailbox'
    assert data['features']['vacation'] is True
    assert data['features']['transport_options'] == ['virtual', 'local', 'relay']
    assert data['hooks']['create_mailbox_subdirs'] is None
    assert 'hunter2' not in await resp.text()


async def test_setup_check_reports_hooks(aiohttp_client, make_config):
    config = make_config(
        domain_postdeletion_script='/usr/local/bin/domain-postdeletion.sh',
        create_mailbox_subdirs=['Spam'],
        create_mailbox_subdirs_host='localhost',
    )
    client = await aiohttp_client(create_app(config))

    data = await (await client.get('/admin/setup')).json()
    assert data['hooks']['domain_postdeletion_script'] is True
    assert data['hooks']['mailbox_postcreation_script'] is False
    assert data['hooks']['create_mailbox_subdirs'] == ['Spam']


async def test_status_key_hidden_by_default(aiohttp_client, make_config):
    client = await aiohttp_client(create_app(make_config()))
    resp = await client.get('/admin/status-key')
    assert resp.status == 404


async def test_status_key_legend(aiohttp_client, make_config):
    config = make_config(
        show_status_key='YES',
        show_undeliverable='YES',
        show_header_text='YES',
        header_text='Example Mail',
        show_custom_count=1,
    )
    client = await aiohttp_client(create_app(config))

    resp = await client.get('/admin/status-key')
    assert resp.status == 200
    body = await resp.text()
    assert 'tomato' in body
    assert 'darkgrey' not in body
    assert 'lightgreen' in body
    assert 'lightblue' not in body
    assert 'Example Mail' in body
    assert 'Return to change-this-to-your.domain.tld' in body


async def test_root_redirects_to_setup(aiohttp_client, make_config):
    client = await aiohttp_client(create_app(make_config()))
    resp = await client.get('/', allow_redirects=False)
    assert resp.status == 302
    assert resp.headers['Location'] == '/admin/setup'
