"""
Web Admin module.

This module is part of the Mail Admin Panel project.
"""

# web_admin.py
import html
import logging

from aiohttp import web

from config import AdminConfig
from settings import GROUP_FEATURES, GROUP_HOOKS, TABLE_NAMES

logger = logging.getLogger(__name__)


class WebAdmin:
    def __init__(self, config: AdminConfig):
        self.config = config
        logger.info("WebAdmin initialized with database %s", self.config.database.name)

    async def setup_check(self, request):
        logger.info("Serving setup check")
        config = self.config
        db = config.database

        hooks = config.group(GROUP_HOOKS)
        subdirs = config.mailbox_subdirs
        return web.json_response({
            "configured": config.configured,
            "source": config.source,
            "database": {
                "type": db.type,
                "host": db.host,
                "user": db.user,
                "name": db.name,
                "prefix": db.prefix,
                "tables": {name: config.table(name) for name in TABLE_NAMES},
            },
            "features": config.group(GROUP_FEATURES),
            "hooks": {
                "mailbox_postcreation_script": hooks['mailbox_postcreation_script'] is not None,
                "mailbox_postdeletion_script": hooks['mailbox_postdeletion_script'] is not None,
                "domain_postdeletion_script": hooks['domain_postdeletion_script'] is not None,
                "create_mailbox_subdirs": list(subdirs.folders) if subdirs else None,
            },
        })

    def _header(self) -> str:
        if not self.config.get('show_header_text'):
            return ''
        return f"<div id=\"header\">{html.escape(self.config.get('header_text'))}</div>"

    def _footer(self) -> str:
        if not self.config.get('show_footer_text'):
            return ''
        return (f"<div id=\"footer\"><a href=\"{html.escape(self.config.get('footer_link'))}\">"
                f"{html.escape(self.config.get('footer_text'))}</a></div>")

    def _legend_row(self, color: str, label: str) -> str:
        # show_status_text may hold entities such as &nbsp; and is not escaped
        return (f"<tr><td style=\"background-color: {html.escape(color)}\">"
                f"{self.config.get('show_status_text')}</td><td>{html.escape(label)}</td></tr>")

    async def status_key(self, request):
        config = self.config
        if not config.get('show_status_key'):
            logger.info("Status key requested but show_status_key is disabled")
            raise web.HTTPNotFound()

        rows = []
        if config.get('show_undeliverable'):
            rows.append(self._legend_row(config.get('show_undeliverable_color'), 'Undeliverable destination'))
        if config.get('show_popimap'):
            rows.append(self._legend_row(config.get('show_popimap_color'), 'POP/IMAP mailbox'))
        for indicator in config.custom_indicators:
            rows.append(self._legend_row(indicator.color, f"Delivers to {indicator.domain}"))

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <title>Status key</title>
            <meta charset="UTF-8">
        </head>
        <body>
            {self._header()}
            <table id="statusKey">
                {''.join(rows)}
            </table>
            {self._footer()}
        </body>
        </html>
        """
        return web.Response(text=html_content, content_type='text/html')


def create_app(config: AdminConfig) -> web.Application:
    web_admin = WebAdmin(config)

    admin_app = web.Application()
    admin_app.router.add_get('/setup', web_admin.setup_check)
    admin_app.router.add_get('/status-key', web_admin.status_key)

    app = web.Application()
    app.add_subapp('/admin/', admin_app)

    async def redirect_to_setup(request):
        raise web.HTTPFound('/admin/setup')

    app.router.add_get('/', redirect_to_setup)
    logger.info('Admin web application set up')
    return app
