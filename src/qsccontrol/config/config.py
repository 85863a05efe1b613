"""
Loads layered configuration files.

A configuration named `name` is assembled from these files, later files overriding earlier ones:

- `<name>.default.cfg`
- `<name>.<os>.cfg`, where os is one of windows, linux, osx
- `~/<name>.cfg`, the user's own overrides
- `<name>.cfg`

The result is validated against `<name>.schema.cfg`, which also supplies defaults for
anything no file sets.
"""
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section, flatten_errors
from validate import Validator

# The default extension for configuration files
config_extension = '.cfg'


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('qsccontrol', 'schema')
    'qsccontrol.schema'
    """
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory):
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True) -> ConfigObj:
    """
    Loads a single configuration file.
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file, empty if the file does not exist.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file) from e


def config_flavor_file(name, directory, flavor=None) -> ConfigObj:
    """
    Loads a specialization of a config file, or an empty configuration if there is none.
    """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def describe_errors(config, result):
    """
    Lists the validation failures in a result from ConfigObj.validate().
    >>> describe_errors(ConfigObj({'client': {}}), {'client': {'ttl': False}})
    ['client.ttl: missing']
    """
    errors = []
    for sections, key, error in flatten_errors(config, result):
        path = '.'.join(sections + [key]) if key is not None else '.'.join(sections)
        errors.append("%s: %s" % (path, error if error else 'missing'))
    return errors


def load_config(name, directory, schema_directory=None, user_overrides=True, schema_name=None) -> ConfigObj:
    """
    Loads all the configuration files that relate to the given name, flattens them into a single
    configuration and validates it. Without a schema file the values are returned unvalidated, as strings.
    :param name: the base name of the configuration files.
    :param directory: the location of the configuration files.
    :param schema_directory: the location of the schema file, when different from directory.
    :param user_overrides: when False, the file in the user's home directory is not consulted.
    :param schema_name: the base name of the schema file, when different from name.
    :return: the validated configuration. Values have been converted to the types the schema declares.
    """
    schema = config_filename(config_flavor(schema_name or name, 'schema'), schema_directory or directory)
    config = ConfigObj(configspec=schema if os.path.exists(schema) else None)
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    if user_overrides:
        config.merge(load_config_file_base(os.path.expanduser('~/' + name + config_extension), must_exist=False))
    config.merge(config_flavor_file(name, directory))

    if config.configspec is None:
        return config
    result = config.validate(Validator(), preserve_errors=True)
    if result is not True:
        raise ConfigObjError("the config file %s failed validation: %s" %
                             (name, ', '.join(describe_errors(config, result))))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:    The root configuration
    :param path:    An iterable that lists the names of the sections to descend through
    :return: The configuration section identified by the path, or None if there is no such section.
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf_path(conf: Section, name_parts, target):
    """
    Applies the section at a configuration path to a given target object
    :param conf:        The root configuration object
    :param name_parts:  The path of the section to apply
    :param target:      The target object that receives the configured values
    :return: True if the section exists
    """
    conf = fetch_conf_path(conf, name_parts)
    if conf is None:
        return False
    apply_conf(conf, target)
    return True


def apply_conf(conf: Section, target):
    """
    Sets each attribute of the target that has a value of the same name in the configuration.
    Configuration values with no matching attribute are ignored.
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)
