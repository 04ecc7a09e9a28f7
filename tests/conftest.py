import pytest
import yaml

from fingerd.config import FingerConfig


ALIASES = {
	'avatar': 'http://webfinger.net/rel/avatar',
	'openid': 'http://openid.net/specs/connect/1.0/issuer'
}

TENANTS = {
	'example': {
		'domain': 'example.com',
		'users': {
			'alice@example.com': {
				'name': 'Alice',
				'avatar': 'https://cdn.example/a.png'
			},
			'https://example.com/users/bob': {
				'blog': 'https://bob.example/'
			}
		}
	},
	'corp': {
		'domain': 'corp.example',
		'global': True,
		'openid': 'https://idp.example/openid',
		'users': {
			'ceo@corp.example': {
				'title': 'Chief Executive'
			}
		}
	}
}


@pytest.fixture
def write_yaml():
	def write(path, data):
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(yaml.safe_dump(data, sort_keys=False))
		return path

	return write


@pytest.fixture
def config_dir(tmp_path, write_yaml):
	'A settings directory with an alias table and one tenant source'

	write_yaml(tmp_path / 'urns.yml', ALIASES)
	write_yaml(tmp_path / 'config' / 'tenants.yml', TENANTS)
	return tmp_path


@pytest.fixture
def settings(config_dir):
	return FingerConfig(config_dir / 'fingerd.yaml')
