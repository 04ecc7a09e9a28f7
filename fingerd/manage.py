import asyncio
import click
import json
import logging
import os
import signal

from aiohttp.web import AppRunner, Application, TCPSite

from . import __version__, logger, views
from .compiler import build_index
from .config import FingerConfig
from .exceptions import ConfigError, FingerError, NotFound
from .resolver import resource_domain


def create_app(config, index):
	app = Application(middlewares=[views.cors_middleware])
	app[views.config_key] = config
	app[views.index_key] = index

	app.router.add_get('/.well-known/webfinger', views.webfinger)
	app.router.add_get('/healthz', views.healthz)

	return app


def load_index(config):
	try:
		return build_index(config)

	except FingerError as e:
		logging.error(f'Failed to load configuration: {e}')
		raise click.ClickException(str(e)) from None


@click.group('cli', context_settings={'show_default': True}, invoke_without_command=True)
@click.option('--config', '-c', default='fingerd.yaml', help='path to the service settings')
@click.option('--log-level', '-l', default=None, help='override the LOG_LEVEL environment variable')
@click.version_option(version=__version__, prog_name='fingerd')
@click.pass_context
def cli(ctx, config, log_level):
	if log_level:
		logger.setup(log_level, logger.get_log_file(os.environ.get('LOG_FILE')), force=True)

	ctx.obj = FingerConfig(config, bool(os.environ.get('DOCKER_RUNNING')))

	try:
		ctx.obj.load()

	except ConfigError as e:
		raise click.ClickException(str(e)) from None

	if not ctx.invoked_subcommand:
		ctx.invoke(finger_run)


@cli.command('run')
@click.pass_obj
def finger_run(config):
	'Run the WebFinger server'

	index = load_index(config)
	asyncio.run(handle_start_webserver(create_app(config, index), config))


@cli.command('check')
@click.pass_obj
def finger_check(config):
	'Compile the tenant configuration and list what would be served'

	index = load_index(config)
	click.echo(f'Loaded {len(index)} tenants with {index.document_count} total webfingers')

	for tenant in index:
		click.echo(f'- {tenant.name}: {tenant.domain} ({len(tenant.documents)} webfingers, global: {tenant.global_})')

		for subject in tenant.documents:
			click.echo(f'    {subject}')


@cli.command('lookup')
@click.argument('resource')
@click.option('--domain', '-d', default=None, help='requesting domain, taken from RESOURCE when omitted')
@click.pass_obj
def finger_lookup(config, resource, domain):
	'Resolve RESOURCE the way the server would and print the document'

	index = load_index(config)
	domain = domain or resource_domain(resource) or config.default_host

	try:
		document = index.resolve(resource, domain)

	except NotFound as e:
		raise click.ClickException(str(e)) from None

	click.echo(json.dumps(document.to_json(), indent=4))


async def handle_start_webserver(app, config):
	runner = AppRunner(app)
	await runner.setup()

	site = TCPSite(runner, config.listen, config.port)
	await site.start()

	logging.info(f'Starting webserver at {config.listen}:{config.port}')

	stop = asyncio.Event()
	loop = asyncio.get_running_loop()

	for signum in (signal.SIGINT, signal.SIGTERM):
		loop.add_signal_handler(signum, stop.set)

	try:
		await stop.wait()
		logging.info('Shutdown signal received')

	finally:
		await runner.cleanup()

	logging.info('Server shutdown complete')


def main():
	cli(prog_name='fingerd')


if __name__ == '__main__':
	main()
