import logging
import re

from urllib.parse import urlsplit

from . import loader
from .exceptions import ValidationError
from .models import CompiledTenant, Document, Link, wildcard_subject
from .resolver import TenantIndex


ACCT_PREFIX = 'acct:'
EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')


def is_url(value):
	'Return True when ``value`` is an absolute URL: a scheme followed by a host or a path'

	if not value or any(char.isspace() for char in value):
		return False

	try:
		parts = urlsplit(value)

	except ValueError:
		return False

	## older urlsplit accepts schemes like '12' in '12:30'
	if not parts.scheme or not parts.scheme[0].isalpha():
		return False

	return bool(parts.netloc or parts.path)


def normalize_subject(identifier):
	'''
	Turn a user identifier from a tenant source into a subject.

	``alice@example.com`` and ``acct:alice@example.com`` both become
	``acct:alice@example.com``. Absolute URLs are kept as they are. Anything
	else raises ValidationError.
	'''

	candidate = identifier[len(ACCT_PREFIX):] if identifier.startswith(ACCT_PREFIX) else identifier

	if EMAIL_PATTERN.fullmatch(candidate):
		return ACCT_PREFIX + candidate

	## an acct: URI that isn't shaped like an address isn't a valid subject either
	if is_url(candidate) and not candidate.startswith(ACCT_PREFIX):
		return candidate

	raise ValidationError('invalid subject format', identifier)


def build_document(subject, attributes, aliases):
	links = []
	properties = {}

	for key, value in attributes.items():
		rel = aliases.get(key, key)

		if is_url(value):
			links.append(Link(rel, value))

		else:
			properties[rel] = value

	return Document(subject, links, properties)


def compile_tenant(definition, aliases):
	documents = {}

	for identifier, attributes in definition.users.items():
		try:
			subject = normalize_subject(identifier)

		except ValidationError as e:
			raise ValidationError(e.message, identifier, definition.name) from None

		if subject in documents:
			logging.warning(f'Tenant {definition.name!r}: {identifier!r} replaces an earlier entry for {subject}')

		documents[subject] = build_document(subject, attributes, aliases)

	## global tenants answer for any account on their domain, but only with an identity to hand out
	if definition.global_ and definition.openid is not None:
		subject = wildcard_subject(definition.domain)
		documents[subject] = build_document(subject, {'openid': definition.openid}, aliases)

	return CompiledTenant(definition.name, definition.domain, definition.global_, documents)


def compile_index(definitions, aliases):
	tenants = []

	for name, definition in definitions.items():
		tenant = compile_tenant(definition, aliases)
		tenants.append(tenant)

		logging.info(f"Loaded tenant '{name}' for domain '{tenant.domain}' with {len(tenant.documents)} webfingers (global: {tenant.global_})")

		for subject in tenant.documents:
			logging.debug(f'  - {subject}')

	return TenantIndex(tenants)


def build_index(config):
	aliases = loader.load_aliases(config.urns_path)
	definitions = loader.load_tenants(config.tenants_path)
	index = compile_index(definitions, aliases)

	logging.info(f'Loaded {len(index)} tenants with {index.document_count} total webfingers')
	return index
