from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


WILDCARD_LOCAL = '*'


def frozen_mapping(data=None):
	return MappingProxyType(dict(data or {}))


def wildcard_subject(domain):
	return f'acct:{WILDCARD_LOCAL}@{domain}'


@dataclass(frozen=True)
class Link:
	rel: str
	href: Optional[str] = None


	def to_json(self):
		data = {'rel': self.rel}

		if self.href is not None:
			data['href'] = self.href

		return data


@dataclass(frozen=True)
class Document:
	'''
	A WebFinger record (JRD) for one subject.

	``links`` keeps the order the attributes were authored in. ``links`` and
	``properties`` are left out of the JSON form when they are empty and a
	link's ``href`` is left out when it isn't set.
	'''

	subject: str
	links: Tuple[Link, ...] = ()
	properties: Mapping[str, str] = field(default_factory=frozen_mapping)


	def __post_init__(self):
		object.__setattr__(self, 'links', tuple(self.links))
		object.__setattr__(self, 'properties', frozen_mapping(self.properties))


	def personalize(self, subject):
		return replace(self, subject=subject)


	def to_json(self):
		data = {'subject': self.subject}

		if self.links:
			data['links'] = [link.to_json() for link in self.links]

		if self.properties:
			data['properties'] = dict(self.properties)

		return data


@dataclass(frozen=True)
class TenantDefinition:
	'Raw tenant entry as read from a tenant source, before compilation'

	name: str
	domain: str
	global_: bool = False
	openid: Optional[str] = None
	users: Mapping[str, Mapping[str, str]] = field(default_factory=frozen_mapping)
	source: Optional[str] = None


	def __post_init__(self):
		users = {user: frozen_mapping(attributes) for user, attributes in self.users.items()}
		object.__setattr__(self, 'users', frozen_mapping(users))


@dataclass(frozen=True)
class CompiledTenant:
	name: str
	domain: str
	global_: bool
	documents: Mapping[str, Document] = field(default_factory=frozen_mapping)


	def __post_init__(self):
		object.__setattr__(self, 'documents', frozen_mapping(self.documents))


	@property
	def wildcard_subject(self):
		return wildcard_subject(self.domain)
