"""
View State
==========

Serializable state owned by each screen. Actions return new instances
rather than mutating shared state.
"""

from dataclasses import asdict, dataclass, replace
from typing import Optional

from .filters import collect_tags, filter_projects

FEATURED_COUNT = 3


@dataclass(frozen=True)
class PortfolioView:
    """Public portfolio and admin dashboard listing"""

    projects: tuple = ()
    query: str = ''
    selected_tag: str = ''
    loading: bool = True
    error: Optional[str] = None

    @property
    def visible_projects(self):
        return filter_projects(list(self.projects), self.query, self.selected_tag)

    @property
    def available_tags(self):
        return collect_tags(self.projects)

    @property
    def featured(self):
        return list(self.projects[:FEATURED_COUNT])

    @property
    def others(self):
        return list(self.projects[FEATURED_COUNT:])

    @property
    def is_filtered(self):
        return bool(self.query or self.selected_tag)

    def to_dict(self):
        return asdict(self)


def projects_loaded(view, projects):
    return replace(view, projects=tuple(projects), loading=False, error=None)


def load_failed(view, message):
    return replace(view, loading=False, error=message)


def set_query(view, query):
    return replace(view, query=query)


def select_tag(view, tag):
    return replace(view, selected_tag=tag or '')


@dataclass(frozen=True)
class ProjectFormState:
    title: str = ''
    description: str = ''
    image: str = ''
    external_link: str = ''
    tags: tuple = ()
    tag_input: str = ''

    @classmethod
    def from_project(cls, project):
        return cls(
            title=project.get('title') or '',
            description=project.get('description') or '',
            image=project.get('image') or '',
            external_link=project.get('externalLink') or '',
            tags=tuple(project.get('tags') or ()),
        )

    def to_payload(self):
        return {
            'title': self.title,
            'description': self.description,
            'image': self.image,
            'tags': list(self.tags),
            'externalLink': self.external_link,
        }


def edit_field(form, **changes):
    return replace(form, **changes)


def add_tag(form):
    """Move tag_input into tags; blanks and duplicates are ignored"""
    tag = form.tag_input.strip()
    if not tag or tag in form.tags:
        return form
    return replace(form, tags=form.tags + (tag,), tag_input='')


def remove_tag(form, tag):
    return replace(form, tags=tuple(t for t in form.tags if t != tag))


@dataclass(frozen=True)
class SettingsView:
    name: str = ''
    email: str = ''
    bio: str = ''
    loading: bool = True
    saving: bool = False
    message_kind: Optional[str] = None
    message_text: Optional[str] = None

    def to_payload(self):
        return {'name': self.name, 'bio': self.bio}


def profile_loaded(view, profile):
    return replace(
        view,
        name=profile.get('name') or '',
        email=profile.get('email') or '',
        bio=profile.get('bio') or '',
        loading=False,
    )


def save_started(view):
    return replace(view, saving=True, message_kind=None, message_text=None)


def save_finished(view, error=None):
    if error:
        return replace(view, saving=False, message_kind='error', message_text=error)
    return replace(view, saving=False, message_kind='success', message_text='Profile updated successfully!')
