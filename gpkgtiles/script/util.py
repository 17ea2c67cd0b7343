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

import logging
import logging.config
import sys


def setup_logging(level=logging.INFO, format=None):
    gpkgtiles_log = logging.getLogger('gpkgtiles')
    gpkgtiles_log.setLevel(level)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    if not format:
        format = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format)
    ch.setFormatter(formatter)
    gpkgtiles_log.addHandler(ch)


def init_logging(log_conf=None, level=logging.WARN):
    """
    Configure logging from the ``log_conf`` ini file of the
    configuration, or log to stderr with `level`.
    """
    if log_conf:
        logging.config.fileConfig(log_conf, disable_existing_loggers=False)
    else:
        setup_logging(level)
