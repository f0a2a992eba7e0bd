"""
Client-side search and tag filtering over a loaded project list.

Pure functions; input order is preserved.
"""


def matches_query(project, query):
    """Case-insensitive substring match on title or description"""
    if not query:
        return True
    needle = query.lower()
    return (needle in (project.get('title') or '').lower()
            or needle in (project.get('description') or '').lower())


def has_tag(project, tag):
    if not tag:
        return True
    return tag in (project.get('tags') or [])


def filter_projects(projects, query='', tag=''):
    return [p for p in projects if matches_query(p, query) and has_tag(p, tag)]


def collect_tags(projects):
    """Sorted, deduplicated union of every project's tags"""
    return sorted({tag for p in projects for tag in (p.get('tags') or [])})
