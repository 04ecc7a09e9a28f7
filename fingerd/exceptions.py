class FingerError(Exception):
	'Base class for errors raised while loading or resolving webfingers'


class ConfigError(FingerError):
	'A configuration source is unreadable or malformed'

	def __init__(self, message, source=None):
		super().__init__(message)
		self.message = message
		self.source = source


	def __str__(self):
		if self.source is None:
			return self.message

		return f'{self.source}: {self.message}'


class ValidationError(FingerError):
	'A user identifier could not be turned into a subject'

	def __init__(self, message, identifier, tenant=None):
		super().__init__(message)
		self.message = message
		self.identifier = identifier
		self.tenant = tenant


	def __str__(self):
		text = f'{self.message}: {self.identifier!r}'

		if self.tenant is not None:
			text += f' (tenant {self.tenant!r})'

		return text


class NotFound(FingerError):
	'No document matches the requested resource'

	def __init__(self, resource, domain):
		super().__init__(resource, domain)
		self.resource = resource
		self.domain = domain


	def __str__(self):
		return f'resource not found: {self.resource} for domain {self.domain}'
