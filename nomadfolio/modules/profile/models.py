"""
Profile documents stored under profile:<ownerId>.
"""

from ...core.errors import ValidationError

EDITABLE_FIELDS = ('name', 'bio', 'avatar')


def new_profile(owner_id, name, email, bio):
    """Profile written at signup"""
    return {
        'ownerId': owner_id,
        'name': name,
        'email': email,
        'bio': bio,
        'avatar': None,
    }


def default_profile(user):
    """Profile derived from identity claims when none is stored yet"""
    metadata = user.get('user_metadata') or {}
    return {
        'ownerId': user['id'],
        'name': metadata.get('name'),
        'email': user.get('email'),
        'bio': '',
        'avatar': None,
    }


def clean_profile_updates(data):
    """Keep the editable fields of a partial profile.

    email mirrors the identity provider and ownerId is fixed, so both are
    dropped along with any unknown keys.
    """
    if not isinstance(data, dict):
        raise ValidationError('Profile updates must be a JSON object')

    updates = {}
    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if value is not None and not isinstance(value, str):
            raise ValidationError(f'{field} must be a string')
        updates[field] = value
    return updates


def merge_profile(current, updates, user):
    merged = dict(current or {})
    merged.update(updates)
    merged['ownerId'] = user['id']
    merged['email'] = user.get('email', merged.get('email'))
    return merged
