import logging
import yaml

from pathlib import Path

from .exceptions import ConfigError
from .models import TenantDefinition, frozen_mapping


TENANT_SUFFIXES = {'.yml', '.yaml'}

## tenant files are read with BaseLoader, so nulls and booleans arrive as text
NULL_VALUES = {'', '~', 'null', 'Null', 'NULL'}
BOOL_VALUES = {
	'true': True,
	'True': True,
	'TRUE': True,
	'false': False,
	'False': False,
	'FALSE': False
}


def read_yaml(path, loader=yaml.SafeLoader):
	'Parse a YAML file. A missing file raises FileNotFoundError for the caller to handle'

	try:
		with path.open(encoding='utf-8') as fd:
			return yaml.load(fd, Loader=loader)

	except FileNotFoundError:
		raise

	except UnicodeDecodeError as e:
		raise ConfigError(f'failed to decode file: {e}', path) from e

	except yaml.YAMLError as e:
		raise ConfigError(f'failed to parse YAML: {e}', path) from e

	except OSError as e:
		raise ConfigError(f'failed to read file: {e}', path) from e


def is_null(value):
	return value is None or (isinstance(value, str) and value in NULL_VALUES)


def load_aliases(path):
	path = Path(path)

	try:
		data = read_yaml(path)

	except FileNotFoundError:
		logging.verbose(f'No URN alias file at {path}, using an empty alias table')
		return frozen_mapping()

	if data is None:
		return frozen_mapping()

	if not isinstance(data, dict):
		raise ConfigError('URN aliases must be a mapping of keys to relations', path)

	for key, value in data.items():
		if not isinstance(key, str) or not isinstance(value, str):
			raise ConfigError(f'URN alias {key!r} must map a string to a string', path)

	logging.verbose(f'Loaded {len(data)} URN aliases from {path}')
	return frozen_mapping(data)


def load_tenants(directory):
	directory = Path(directory)
	tenants = {}

	if not directory.exists():
		logging.verbose(f'No tenant directory at {directory}, starting without tenants')
		return tenants

	if not directory.is_dir():
		raise ConfigError('tenant source location is not a directory', directory)

	## sorted so the last-wins merge doesn't depend on the filesystem
	for path in sorted(directory.iterdir(), key=lambda p: p.name):
		if path.suffix not in TENANT_SUFFIXES or not path.is_file():
			continue

		for name, tenant in parse_tenants(read_yaml(path, yaml.BaseLoader), path).items():
			if name in tenants:
				logging.warning(f'Tenant {name!r} from {path} replaces the one from {tenants[name].source}')

			tenants[name] = tenant

	return tenants


def parse_tenants(data, source=None):
	if is_null(data):
		return {}

	if not isinstance(data, dict):
		raise ConfigError('tenant source must map tenant names to definitions', source)

	return {str(name): parse_tenant(str(name), value, source) for name, value in data.items()}


def parse_tenant(name, data, source=None):
	def error(message):
		return ConfigError(f'tenant {name!r}: {message}', source)

	if not isinstance(data, dict):
		raise error('definition must be a mapping')

	domain = data.get('domain')

	if not isinstance(domain, str) or not domain:
		raise error('domain is required')

	is_global = data.get('global', False)

	if isinstance(is_global, str) and is_global in BOOL_VALUES:
		is_global = BOOL_VALUES[is_global]

	if not isinstance(is_global, bool):
		raise error(f'global must be true or false, not {is_global!r}')

	openid = data.get('openid')

	if is_null(openid):
		openid = None

	elif not isinstance(openid, str):
		raise error(f'openid must be a string, not {openid!r}')

	users = data.get('users')

	if is_null(users):
		users = {}

	if not isinstance(users, dict):
		raise error('users must map user identifiers to attributes')

	parsed = {}

	for user, attributes in users.items():
		if not isinstance(user, str):
			raise error(f'user identifier {user!r} must be a string')

		try:
			parsed[user] = parse_attributes(attributes)

		except ValueError as e:
			raise error(f'user {user!r}: {e}') from None

	return TenantDefinition(
		name = name,
		domain = domain,
		global_ = is_global,
		openid = openid,
		users = parsed,
		source = str(source) if source is not None else None
	)


def parse_attributes(data):
	if is_null(data):
		return {}

	if not isinstance(data, dict):
		raise ValueError('attributes must be a mapping')

	attributes = {}

	for key, value in data.items():
		if not isinstance(key, str):
			raise ValueError(f'attribute key {key!r} must be a string')

		## values are served exactly as written, so only text is accepted
		if not isinstance(value, str):
			raise ValueError(f'attribute {key!r} must be a string, not {value!r}')

		attributes[key] = value

	return attributes
