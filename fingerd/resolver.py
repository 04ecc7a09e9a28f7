import logging

from types import MappingProxyType

from .exceptions import NotFound


def resource_domain(resource):
	'Domain part of an ``acct:local@domain`` resource, None for anything else'

	if not resource.startswith('acct:'):
		return None

	parts = resource[5:].split('@')

	if len(parts) < 2:
		return None

	return parts[1]


class TenantIndex:
	'''
	Compiled tenants, looked up by the domain a request was made to.

	The index is built once at startup and only read afterwards. When several
	tenants claim the same domain the first one serves it.
	'''

	def __init__(self, tenants=()):
		self._tenants = tuple(tenants)
		domains = {}

		for tenant in self._tenants:
			if tenant.domain in domains:
				logging.warning(f"Tenant '{tenant.name}' is shadowed by '{domains[tenant.domain].name}' for domain '{tenant.domain}'")
				continue

			domains[tenant.domain] = tenant

		self._domains = MappingProxyType(domains)


	def __iter__(self):
		return iter(self._tenants)


	def __len__(self):
		return len(self._tenants)


	@property
	def document_count(self):
		return sum(len(tenant.documents) for tenant in self._tenants)


	def get_tenant(self, domain):
		return self._domains.get(domain)


	def resolve(self, resource, domain):
		tenant = self._domains.get(domain)

		if tenant is None:
			logging.verbose(f'No tenant found for domain: {domain}')
			raise NotFound(resource, domain)

		document = tenant.documents.get(resource)

		if document is not None:
			return document

		if tenant.global_ and resource_domain(resource) == domain:
			template = tenant.documents.get(tenant.wildcard_subject)

			if template is not None:
				return template.personalize(resource)

		raise NotFound(resource, domain)
