"""
Models module.

This module is part of the Mail Admin Panel project.

Table names are not fixed: every table is created under the physical name the
configuration maps its logical name to, with ``database_prefix`` applied.
"""

# models.py
import datetime
from typing import Dict

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, MetaData, PrimaryKeyConstraint, String, Table, Text
)

from config import AdminConfig
from settings import TABLE_NAMES


def _now():
    return datetime.datetime.utcnow()


def _timestamps():
    return [
        Column('created', DateTime, default=_now, nullable=False),
        Column('modified', DateTime, default=_now, onupdate=_now, nullable=False),
    ]


def build_metadata(config: AdminConfig) -> MetaData:
    metadata = MetaData()
    t = config.table

    Table(
        t('admin'), metadata,
        Column('username', String(255), primary_key=True),
        Column('password', String(255), nullable=False),
        *_timestamps(),
        Column('active', Boolean, default=True, nullable=False),
    )

    Table(
        t('domain'), metadata,
        Column('domain', String(255), primary_key=True),
        Column('description', String(255), default='', nullable=False),
        Column('aliases', Integer, default=config.get('aliases'), nullable=False),
        Column('mailboxes', Integer, default=config.get('mailboxes'), nullable=False),
        Column('maxquota', Integer, default=config.get('maxquota'), nullable=False),
        Column('transport', String(255), default=config.get('transport_default')),
        Column('backupmx', Boolean, default=False, nullable=False),
        *_timestamps(),
        Column('active', Boolean, default=True, nullable=False),
    )

    Table(
        t('alias'), metadata,
        Column('address', String(255), primary_key=True),
        Column('goto', Text, nullable=False),
        Column('domain', String(255), nullable=False, index=True),
        *_timestamps(),
        Column('active', Boolean, default=True, nullable=False),
    )

    Table(
        t('domain_admins'), metadata,
        Column('username', String(255), nullable=False),
        Column('domain', String(255), nullable=False),
        Column('created', DateTime, default=_now, nullable=False),
        Column('active', Boolean, default=True, nullable=False),
        PrimaryKeyConstraint('username', 'domain'),
    )

    Table(
        t('log'), metadata,
        Column('timestamp', DateTime, default=_now, nullable=False, index=True),
        Column('username', String(255), default='', nullable=False),
        Column('domain', String(255), default='', nullable=False),
        Column('action', String(255), default='', nullable=False),
        Column('data', String(255), default='', nullable=False),
    )

    Table(
        t('mailbox'), metadata,
        Column('username', String(255), primary_key=True),
        Column('password', String(255), nullable=False),
        Column('name', String(255), default='', nullable=False),
        Column('maildir', String(255), nullable=False),
        Column('quota', Integer, default=0, nullable=False),
        Column('domain', String(255), nullable=False, index=True),
        *_timestamps(),
        Column('active', Boolean, default=True, nullable=False),
    )

    Table(
        t('vacation'), metadata,
        Column('email', String(255), primary_key=True),
        Column('subject', String(255), nullable=False),
        Column('body', Text, nullable=False),
        Column('cache', Text, default='', nullable=False),
        Column('domain', String(255), nullable=False),
        Column('created', DateTime, default=_now, nullable=False),
        Column('active', Boolean, default=True, nullable=False),
    )

    Table(
        t('vacation_notification'), metadata,
        Column('on_vacation', String(255),
               ForeignKey(f"{t('vacation')}.email", ondelete='CASCADE'), nullable=False),
        Column('notified', String(255), nullable=False),
        Column('notified_at', DateTime, default=_now, nullable=False),
        PrimaryKeyConstraint('on_vacation', 'notified'),
    )

    return metadata


def logical_tables(metadata: MetaData, config: AdminConfig) -> Dict[str, Table]:
    """Map each logical table name to its Table in ``metadata``."""
    return {name: metadata.tables[config.table(name)] for name in TABLE_NAMES}
