import logging
import os

from pathlib import Path


LOG_FORMAT = '[%(asctime)s] %(levelname)s: %(message)s'


## Add the verbose logging level
def verbose(message, *args, **kwargs):
	if not logging.root.isEnabledFor(logging.VERBOSE):
		return

	logging.log(logging.VERBOSE, message, *args, **kwargs)

setattr(logging, 'verbose', verbose)
setattr(logging, 'VERBOSE', 15)
logging.addLevelName(15, 'VERBOSE')


def get_level(name):
	level = logging.getLevelName(name.upper())

	## getLevelName returns a string for names it doesn't know
	if not isinstance(level, int):
		return logging.INFO

	return level


def get_log_file(path):
	if not path:
		return None

	return Path(path).expanduser().resolve()


def setup(level='INFO', log_file=None, force=False):
	handlers = [logging.StreamHandler()]

	if log_file:
		handlers.append(logging.FileHandler(log_file))

	logging.basicConfig(
		level = get_level(level),
		format = LOG_FORMAT,
		handlers = handlers,
		force = force
	)


## Get log level and file from environment if possible
setup(
	os.environ.get('LOG_LEVEL', 'INFO'),
	get_log_file(os.environ.get('LOG_FILE'))
)
