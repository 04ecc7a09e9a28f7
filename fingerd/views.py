import logging

from aiohttp import hdrs
from aiohttp.web import AppKey, Response, json_response, middleware

from .config import FingerConfig
from .exceptions import NotFound
from .resolver import TenantIndex


JRD_CONTENT_TYPE = 'application/jrd+json'

config_key = AppKey('config', FingerConfig)
index_key = AppKey('index', TenantIndex)


def request_domain(request, default='localhost'):
	host = request.headers.get(hdrs.HOST)

	if not host:
		return default

	## keep bracketed ipv6 literals whole
	if host.startswith('['):
		return host.partition(']')[0] + ']'

	return host.split(':')[0]


@middleware
async def cors_middleware(request, handler):
	response = await handler(request)
	response.headers[hdrs.ACCESS_CONTROL_ALLOW_ORIGIN] = '*'
	return response


async def webfinger(request):
	index = request.app[index_key]
	resource = request.query.get('resource')

	if not resource:
		return json_response({'error': 'missing resource'}, status=400)

	domain = request_domain(request, request.app[config_key].default_host)
	logging.debug(f'WebFinger request: resource={resource}, domain={domain}')

	try:
		document = index.resolve(resource, domain)

	except NotFound:
		logging.verbose(f'WebFinger resource not found: {resource} for domain {domain}')
		return json_response({'error': 'resource not found'}, status=404)

	return json_response(document.to_json(), content_type=JRD_CONTENT_TYPE)


async def healthz(request):
	return Response(text='OK')
