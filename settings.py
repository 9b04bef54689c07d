"""
Settings module.

This module is part of the Mail Admin Panel project.

Every key the admin panel understands is declared here exactly once, with its
type, its default and a short description. Values supplied by the operator
override these defaults; anything not declared here is rejected at load time.
"""

# settings.py
import os
from typing import Any, NamedTuple, Optional, Tuple

# Setting kinds
GATE = 'gate'
FLAG = 'flag'
STRING = 'string'
REQUIRED_STRING = 'required_string'
CHOICE = 'choice'
INTEGER = 'integer'
LIST = 'list'
MAP = 'map'
TABLES = 'tables'
GOTO_LIMIT = 'goto_limit'
OPTIONAL_STRING = 'optional_string'
OPTIONAL_INTEGER = 'optional_integer'
OPTIONAL_LIST = 'optional_list'

GROUP_GENERAL = 'general'
GROUP_DATABASE = 'database'
GROUP_MAIL = 'mail'
GROUP_ACCOUNTS = 'accounts'
GROUP_FEATURES = 'features'
GROUP_UI = 'ui'
GROUP_STATUS = 'status'
GROUP_HOOKS = 'hooks'

TABLE_NAMES = (
    'admin',
    'alias',
    'domain',
    'domain_admins',
    'log',
    'mailbox',
    'vacation',
    'vacation_notification',
)


class Setting(NamedTuple):
    key: str
    kind: str
    default: Any
    group: str
    doc: str = ''
    choices: Tuple[Any, ...] = ()
    minimum: Optional[int] = None
    maximum: Optional[int] = None


class DependentGroup(NamedTuple):
    """A primary key whose dependents are only meaningful alongside it."""
    primary: str
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()

    @property
    def dependents(self) -> Tuple[str, ...]:
        return self.required + self.optional


DECLARATIONS = (
    # Must be switched on by the operator once the database settings are done.
    Setting('configured', GATE, False, GROUP_GENERAL,
            'Set to true after editing the configuration; the panel refuses to run until then.'),
    Setting('postfix_admin_url', STRING, '', GROUP_GENERAL,
            'Complete URL of the installation, e.g. http://domain.tld/'),
    Setting('postfix_admin_path', STRING, os.path.dirname(os.path.abspath(__file__)), GROUP_GENERAL,
            'Full filesystem path of the installation.'),
    Setting('default_language', STRING, 'en', GROUP_GENERAL,
            'Language code of the user interface.'),

    Setting('database_type', CHOICE, 'mysql', GROUP_DATABASE,
            'mysql = MySQL 3.23 and 4.0, mysqli = MySQL 4.1+, pgsql = PostgreSQL',
            choices=('mysql', 'mysqli', 'pgsql')),
    Setting('database_host', REQUIRED_STRING, 'localhost', GROUP_DATABASE),
    Setting('database_user', REQUIRED_STRING, 'postfixadmin', GROUP_DATABASE),
    Setting('database_password', STRING, 'postfixadmin', GROUP_DATABASE),
    Setting('database_name', REQUIRED_STRING, 'postfix', GROUP_DATABASE),
    Setting('database_prefix', STRING, '', GROUP_DATABASE,
            'Prepended to every physical table name.'),
    Setting('database_tables', TABLES, {name: name for name in TABLE_NAMES}, GROUP_DATABASE,
            'Logical table name to physical table name.'),

    Setting('admin_email', STRING, 'postmaster@change-this-to-your.domain.tld', GROUP_MAIL,
            'Sender address used when mailing newly created mailboxes.'),
    Setting('smtp_server', STRING, 'localhost', GROUP_MAIL),
    Setting('smtp_port', INTEGER, 25, GROUP_MAIL, minimum=1, maximum=65535),

    Setting('encrypt', CHOICE, 'md5crypt', GROUP_ACCOUNTS,
            'md5crypt = internal md5, system = platform crypt default, cleartext = no hashing',
            choices=('md5crypt', 'system', 'cleartext')),
    Setting('min_password_length', INTEGER, 5, GROUP_ACCOUNTS, minimum=0),
    Setting('generate_password', FLAG, False, GROUP_ACCOUNTS,
            'Generate and display a random password for new mailboxes and admins.'),
    Setting('show_password', FLAG, False, GROUP_ACCOUNTS,
            'Always show the password after adding a mailbox or admin.'),
    Setting('page_size', INTEGER, 10, GROUP_UI, 'Entries per page in listings.', minimum=1),
    Setting('default_aliases', MAP, {
        'abuse': 'abuse@change-this-to-your.domain.tld',
        'hostmaster': 'hostmaster@change-this-to-your.domain.tld',
        'postmaster': 'postmaster@change-this-to-your.domain.tld',
        'webmaster': 'webmaster@change-this-to-your.domain.tld',
    }, GROUP_ACCOUNTS, 'Aliases created for every new domain.'),
    Setting('domain_path', FLAG, False, GROUP_ACCOUNTS,
            'Store mailboxes per domain, e.g. /usr/local/virtual/domain.tld/username@domain.tld'),
    Setting('domain_in_mailbox', FLAG, True, GROUP_ACCOUNTS,
            'Keep the domain in the mailbox path.'),
    Setting('aliases', INTEGER, 10, GROUP_ACCOUNTS, 'Default alias limit for new domains.', minimum=0),
    Setting('mailboxes', INTEGER, 10, GROUP_ACCOUNTS, 'Default mailbox limit for new domains.', minimum=0),
    Setting('maxquota', INTEGER, 10, GROUP_ACCOUNTS, 'Default mailbox quota for new domains, in MB.', minimum=0),

    Setting('quota', FLAG, False, GROUP_FEATURES, 'Enforce mailbox quota.'),
    Setting('quota_multiplier', INTEGER, 1024000, GROUP_FEATURES,
            'Bytes per quota megabyte.', choices=(1024000, 1048576)),
    Setting('transport', FLAG, False, GROUP_FEATURES, 'Allow per-domain transport options.'),
    Setting('transport_options', LIST, ('virtual', 'local', 'relay'), GROUP_FEATURES,
            'virtual accounts, system accounts, backup mx'),
    Setting('transport_default', STRING, 'virtual', GROUP_FEATURES,
            'Must be one of transport_options.'),
    Setting('vacation', FLAG, False, GROUP_FEATURES, 'Enable virtual vacation auto-replies.'),
    Setting('vacation_domain', STRING, 'autoreply.change-this-to-your.domain.tld', GROUP_FEATURES,
            'Autoreply domain routed to the vacation transport; needs no DNS.'),
    Setting('vacation_control', FLAG, True, GROUP_FEATURES),
    Setting('vacation_control_admin', FLAG, True, GROUP_FEATURES),
    Setting('alias_control', FLAG, False, GROUP_FEATURES,
            'Let admins edit the alias created alongside every mailbox.'),
    Setting('alias_control_admin', FLAG, False, GROUP_FEATURES),
    Setting('special_alias_control', FLAG, False, GROUP_FEATURES,
            'Let domain admins edit the default aliases.'),
    Setting('alias_goto_limit', GOTO_LIMIT, 0, GROUP_UI,
            'Destinations shown per alias in the overview; 0 means no limit.'),
    Setting('backup', FLAG, True, GROUP_FEATURES),
    Setting('sendmail', FLAG, True, GROUP_FEATURES),
    Setting('logging', FLAG, True, GROUP_FEATURES, 'Record admin actions in the log table.'),
    Setting('emailcheck_resolve_domain', FLAG, True, GROUP_FEATURES,
            'Check the domain part of new addresses with a name server lookup.'),

    Setting('show_header_text', FLAG, False, GROUP_UI),
    Setting('header_text', STRING, ':: Postfix Admin ::', GROUP_UI),
    Setting('user_footer_link', STRING, 'http://change-this-to-your.domain.tld/main', GROUP_UI),
    Setting('show_footer_text', FLAG, True, GROUP_UI),
    Setting('footer_text', STRING, 'Return to change-this-to-your.domain.tld', GROUP_UI),
    Setting('footer_link', STRING, 'http://change-this-to-your.domain.tld', GROUP_UI),
    Setting('welcome_text', STRING, 'Hi,\n\nWelcome to your new account.', GROUP_UI,
            'Sent to every newly created mailbox.'),

    Setting('show_status', FLAG, False, GROUP_STATUS),
    Setting('show_status_key', FLAG, False, GROUP_STATUS),
    Setting('show_status_text', STRING, '&nbsp;&nbsp;', GROUP_STATUS),
    Setting('show_undeliverable', FLAG, False, GROUP_STATUS),
    Setting('show_undeliverable_color', STRING, 'tomato', GROUP_STATUS),
    Setting('show_undeliverable_exceptions', LIST,
            ('unixmail.domain.ext', 'exchangeserver.domain.ext', 'gmail.com'), GROUP_STATUS),
    Setting('show_popimap', FLAG, False, GROUP_STATUS),
    Setting('show_popimap_color', STRING, 'darkgrey', GROUP_STATUS),
    Setting('show_custom_count', INTEGER, 2, GROUP_STATUS, '0 disables custom indicators.', minimum=0),
    Setting('show_custom_domains', LIST, ('subdomain.domain.ext', 'domain2.ext'), GROUP_STATUS),
    Setting('show_custom_colors', LIST, ('lightgreen', 'lightblue'), GROUP_STATUS,
            'Colour for the custom domain at the same position.'),

    Setting('mailbox_postcreation_script', OPTIONAL_STRING, None, GROUP_HOOKS),
    Setting('mailbox_postdeletion_script', OPTIONAL_STRING, None, GROUP_HOOKS),
    Setting('domain_postdeletion_script', OPTIONAL_STRING, None, GROUP_HOOKS),
    Setting('create_mailbox_subdirs', OPTIONAL_LIST, None, GROUP_HOOKS,
            'IMAP folders created and subscribed for new mailboxes.'),
    Setting('create_mailbox_subdirs_host', OPTIONAL_STRING, None, GROUP_HOOKS),
    Setting('create_mailbox_subdirs_hostport', OPTIONAL_INTEGER, None, GROUP_HOOKS,
            minimum=1, maximum=65535),
    Setting('create_mailbox_subdirs_hostoptions', OPTIONAL_LIST, None, GROUP_HOOKS,
            "Connection flags such as 'notls' or 'novalidate-cert'."),
)

DEPENDENT_GROUPS = (
    DependentGroup(
        'create_mailbox_subdirs',
        required=('create_mailbox_subdirs_host',),
        optional=('create_mailbox_subdirs_hostport', 'create_mailbox_subdirs_hostoptions'),
    ),
)

# (default key, options key)
DEFAULT_MEMBERSHIP = (
    ('transport_default', 'transport_options'),
)

# (domains key, colours key, count key)
CORRELATED_LISTS = (
    ('show_custom_domains', 'show_custom_colors', 'show_custom_count'),
)

SECRET_KEYS = frozenset(['database_password'])

SETTINGS = {setting.key: setting for setting in DECLARATIONS}
