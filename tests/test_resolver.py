import pytest

from fingerd.compiler import compile_index
from fingerd.exceptions import NotFound
from fingerd.models import Link, TenantDefinition
from fingerd.resolver import TenantIndex, resource_domain


OPENID = 'https://idp.example/openid'


@pytest.fixture
def index():
	definitions = {
		'example': TenantDefinition('example', 'example.com', users={
			'alice@example.com': {'name': 'Alice'},
			'https://example.com/users/bob': {'name': 'Bob'}
		}),
		'corp': TenantDefinition('corp', 'corp.example', global_=True, openid=OPENID, users={
			'ceo@corp.example': {'title': 'Chief Executive'}
		})
	}

	return compile_index(definitions, {})


class TestResourceDomain:
	@pytest.mark.parametrize('resource, domain', [
		('acct:alice@example.com', 'example.com'),
		('acct:@example.com', 'example.com'),
		('acct:a@b@c', 'b'),
		('acct:alice', None),
		('https://example.com/users/bob', None),
		('alice@example.com', None)
	])
	def test_resource_domain(self, resource, domain):
		assert resource_domain(resource) == domain


class TestResolve:
	def test_exact_match_is_returned_unchanged(self, index):
		tenant = index.get_tenant('example.com')
		document = index.resolve('acct:alice@example.com', 'example.com')

		assert document is tenant.documents['acct:alice@example.com']
		assert document.properties == {'name': 'Alice'}

	def test_exact_match_on_url_subject(self, index):
		document = index.resolve('https://example.com/users/bob', 'example.com')

		assert document.subject == 'https://example.com/users/bob'

	def test_unknown_domain(self, index):
		with pytest.raises(NotFound) as excinfo:
			index.resolve('acct:alice@example.com', 'unknown.example')

		assert excinfo.value.domain == 'unknown.example'

	def test_subject_from_another_tenant(self, index):
		with pytest.raises(NotFound):
			index.resolve('acct:alice@example.com', 'corp.example')

	def test_unknown_user_on_non_global_tenant(self, index):
		with pytest.raises(NotFound):
			index.resolve('acct:mallory@example.com', 'example.com')

	def test_wildcard_is_personalized(self, index):
		document = index.resolve('acct:anyone@corp.example', 'corp.example')

		assert document.subject == 'acct:anyone@corp.example'
		assert document.links == (Link('openid', OPENID),)

	def test_wildcard_template_is_untouched(self, index):
		index.resolve('acct:anyone@corp.example', 'corp.example')

		assert index.get_tenant('corp.example').documents['acct:*@corp.example'].subject == 'acct:*@corp.example'

	def test_exact_match_beats_wildcard(self, index):
		document = index.resolve('acct:ceo@corp.example', 'corp.example')

		assert document.properties == {'title': 'Chief Executive'}
		assert document.links == ()

	@pytest.mark.parametrize('resource', [
		'https://corp.example/users/bob',
		'acct:x@other-domain.com',
		'acct:nobody'
	])
	def test_not_wildcard_eligible(self, index, resource):
		with pytest.raises(NotFound):
			index.resolve(resource, 'corp.example')

	def test_global_tenant_without_wildcard(self):
		index = compile_index({'corp': TenantDefinition('corp', 'corp.example', global_=True)}, {})

		with pytest.raises(NotFound):
			index.resolve('acct:anyone@corp.example', 'corp.example')


class TestTenantIndex:
	def test_empty(self):
		index = TenantIndex()

		assert len(index) == 0

		with pytest.raises(NotFound):
			index.resolve('acct:alice@example.com', 'example.com')

	def test_first_tenant_serves_shared_domain(self):
		index = compile_index({
			'first': TenantDefinition('first', 'example.com', users={'a@example.com': {'name': 'first'}}),
			'second': TenantDefinition('second', 'example.com', users={'a@example.com': {'name': 'second'}})
		}, {})

		assert len(index) == 2
		assert index.get_tenant('example.com').name == 'first'
		assert index.resolve('acct:a@example.com', 'example.com').properties == {'name': 'first'}
