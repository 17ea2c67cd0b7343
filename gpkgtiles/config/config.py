# This file is part of the gpkgtiles project.
# Copyright (C) 2026 gpkgtiles contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Configuration of GeoPackage handles.

There is no global configuration. :func:`load_config` returns an
:class:`Options` tree that is passed to :class:`gpkgtiles.geopackage.GeoPackage`.
"""

import copy
import logging
import os

from gpkgtiles.exception import ConfigurationError
from gpkgtiles.util.yaml import load_yaml_file, YAMLError

log = logging.getLogger('gpkgtiles.config')


class Options(dict):
    """
    Dictionary with attribute style access.

    >>> o = Options(bar='foo')
    >>> o.bar
    'foo'
    """
    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, dict.__repr__(self))

    def __getattr__(self, name):
        if name in self:
            return self[name]
        else:
            raise AttributeError(name)

    __setattr__ = dict.__setitem__

    def __delattr__(self, name):
        if name in self:
            del self[name]
        else:
            raise AttributeError(name)

    def update(self, other=None, **kw):
        if other is not None:
            if hasattr(other, 'items'):
                it = other.items()
            else:
                it = iter(other)
        else:
            it = kw.items()
        for key, value in it:
            if key in self and isinstance(self[key], Options) and isinstance(value, dict):
                self[key].update(value)
            else:
                self[key] = _to_options_map(value)

    def __deepcopy__(self, memo):
        return Options(copy.deepcopy(list(self.items()), memo))


def _to_options_map(mapping):
    if isinstance(mapping, dict):
        opt = Options()
        for key, value in mapping.items():
            opt[key] = _to_options_map(value)
        return opt
    elif isinstance(mapping, list):
        return [_to_options_map(m) for m in mapping]
    else:
        return mapping


def load_default_config():
    from gpkgtiles.config import defaults
    config_dict = {}
    for var in dir(defaults):
        if var.startswith('_'):
            continue
        config_dict[var] = copy.deepcopy(getattr(defaults, var))
    return _to_options_map(config_dict)


def load_config(config_file=None, config_dict=None):
    """
    Returns the default configuration updated with `config_file` (YAML)
    and `config_dict`. Raises :class:`~gpkgtiles.exception.ConfigurationError`
    for unreadable or invalid configurations.
    """
    from gpkgtiles.config.validator import validate

    config = load_default_config()
    user_conf = {}
    if config_file is not None:
        try:
            user_conf = load_yaml_file(config_file)
        except (OSError, YAMLError) as ex:
            raise ConfigurationError('unable to load configuration %s: %s' % (config_file, ex))
        if isinstance(config_file, str):
            config.conf_base_dir = os.path.abspath(os.path.dirname(config_file))
    if config_dict:
        user_conf = dict(user_conf, **config_dict)

    errors = validate(user_conf)
    if errors:
        for error in errors:
            log.error(error)
        raise ConfigurationError('invalid configuration: %s' % '; '.join(errors))

    config.update(user_conf)
    if config.get('log_conf') and config.get('conf_base_dir'):
        config.log_conf = abspath(config.log_conf, config.conf_base_dir)
    return config


def abspath(path, base_path=None):
    """
    Convert path to absolute path. Uses `base_path` as base, if
    path is relative.
    """
    if base_path:
        return os.path.abspath(os.path.join(base_path, path))
    return os.path.abspath(path)
