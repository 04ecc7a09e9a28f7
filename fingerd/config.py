import logging
import yaml

from pathlib import Path

from .exceptions import ConfigError


class DotDict(dict):
	def __getattr__(self, k):
		try:
			return self[k]

		except KeyError:
			raise AttributeError(f'{self.__class__.__name__} object has no attribute {k}') from None


	def __setattr__(self, k, v):
		if k.startswith('_'):
			super().__setattr__(k, v)

		else:
			self[k] = v


	def __setitem__(self, k, v):
		if type(v) == dict:
			v = DotDict(v)

		super().__setitem__(k, v)


	def __delattr__(self, k):
		try:
			dict.__delitem__(self, k)

		except KeyError:
			raise AttributeError(f'{self.__class__.__name__} object has no attribute {k}') from None


class FingerConfig(DotDict):
	strkeys = {
		'listen',
		'urns',
		'tenants',
		'default_host'
	}

	## values the container image expects, settings files can't move them
	dockerkeys = {
		'listen': '0.0.0.0',
		'port': 8080,
		'urns': '/urns.yml',
		'tenants': '/config'
	}


	def __init__(self, path, is_docker=False):
		self._isdocker = is_docker
		self._path = Path(path).expanduser()

		super().__init__({
			'listen': '0.0.0.0',
			'port': 8080,
			'urns': 'urns.yml',
			'tenants': 'config',
			'default_host': 'localhost'
		})

		if is_docker:
			dict.update(self, self.dockerkeys)


	def __setitem__(self, key, value):
		if self._isdocker and key in self.dockerkeys:
			return

		if key == 'port':
			if isinstance(value, bool) or not isinstance(value, int):
				raise ConfigError(f'{key} must be an integer, not {value!r}', self.path)

		elif key in self.strkeys:
			if not isinstance(value, str) or not value:
				raise ConfigError(f'{key} must be a non-empty string, not {value!r}', self.path)

		super().__setitem__(key, value)


	@property
	def path(self):
		return self._path


	@property
	def urns_path(self):
		return self._path.parent.joinpath(self.urns).expanduser()


	@property
	def tenants_path(self):
		return self._path.parent.joinpath(self.tenants).expanduser()


	def load(self):
		try:
			with self.path.open(encoding='utf-8') as fd:
				config = yaml.safe_load(fd)

		except FileNotFoundError:
			logging.verbose(f'No settings file at {self.path}, using defaults')
			return False

		except UnicodeDecodeError as e:
			raise ConfigError(f'failed to decode settings: {e}', self.path) from e

		except yaml.YAMLError as e:
			raise ConfigError(f'failed to parse settings: {e}', self.path) from e

		except OSError as e:
			raise ConfigError(f'failed to read settings: {e}', self.path) from e

		if not config:
			return False

		if not isinstance(config, dict):
			raise ConfigError('settings must be a mapping', self.path)

		for key, value in config.items():
			if key not in self:
				logging.verbose(f'Ignoring unknown setting: {key}')
				continue

			self[key] = value

		return True
