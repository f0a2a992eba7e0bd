"""
Project Documents
=================

Field normalisation and timestamps for documents stored under
projects:<ownerId>:<projectId>.

Only the caller-editable fields are accepted; id, ownerId and createdAt are
set by the server and never change afterwards.
"""

import uuid
from datetime import datetime, timedelta, timezone

from ...core.errors import ValidationError

EDITABLE_FIELDS = ('title', 'description', 'image', 'tags', 'externalLink')


def utc_now():
    return datetime.now(timezone.utc)


def next_timestamp(previous=None):
    """ISO-8601 timestamp strictly later than previous (if given)"""
    now = utc_now()
    if previous:
        prev = datetime.fromisoformat(previous)
        if now <= prev:
            now = prev + timedelta(microseconds=1)
    return now.isoformat(timespec='microseconds')


def normalize_tags(tags):
    """Strip, drop blanks, dedupe keeping first occurrence"""
    if not isinstance(tags, list):
        raise ValidationError('tags must be a list of strings')

    seen = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValidationError('tags must be a list of strings')
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _optional_url(field, value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    return value.strip() or None


def clean_project_fields(data, partial=False):
    """Validate caller fields; partial=True keeps only the keys present"""
    if not isinstance(data, dict):
        raise ValidationError('Project fields must be a JSON object')

    fields = {}

    if 'title' in data or not partial:
        title = data.get('title')
        if not isinstance(title, str) or not title.strip():
            raise ValidationError('Title is required')
        fields['title'] = title.strip()

    if 'description' in data or not partial:
        description = data.get('description')
        if description is None:
            description = ''
        if not isinstance(description, str):
            raise ValidationError('description must be a string')
        fields['description'] = description

    for field in ('image', 'externalLink'):
        if field in data or not partial:
            fields[field] = _optional_url(field, data.get(field))

    if 'tags' in data or not partial:
        tags = data.get('tags')
        fields['tags'] = normalize_tags(tags if tags is not None else [])

    return fields


def new_project(owner_id, fields):
    stamp = next_timestamp()
    project = {'id': str(uuid.uuid4()), 'ownerId': owner_id}
    project.update(fields)
    project['createdAt'] = stamp
    project['updatedAt'] = stamp
    return project


def merge_project(existing, updates):
    merged = dict(existing)
    merged.update(updates)
    merged['id'] = existing['id']
    merged['ownerId'] = existing['ownerId']
    merged['createdAt'] = existing.get('createdAt')
    merged['updatedAt'] = next_timestamp(existing.get('updatedAt'))
    return merged


def newest_first(projects):
    return sorted(projects, key=lambda p: p.get('createdAt') or '', reverse=True)
