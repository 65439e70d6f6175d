# Copyright 2018-2019, Wayfair GmbH
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import os
import subprocess

from solrops.cluster import DEFAULT_ZK_PORT
from solrops.errors import ArgumentError, TransportError

#
# Config set transfer between a local directory and ZooKeeper, done by
# shelling out to the zkcli tool shipped with Solr
#

logger = logging.getLogger(__name__)


class ProcessResult():
    """Exit status and captured output of an external command."""

    def __init__(self, command, returncode, stdout='', stderr=''):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def ok(self):
        return self.returncode == 0

    def __repr__(self):
        return 'ProcessResult({!r}, rc={})'.format(' '.join(self.command), self.returncode)


def run_command(command, timeout=None):
    """Runs `command` to completion and captures what it printed."""
    logger.debug("Running: %s", ' '.join(command))
    try:
        completed = subprocess.run(command, stdout=subprocess.PIPE,
                                   stderr=subprocess.PIPE,
                                   universal_newlines=True, timeout=timeout)
    except OSError as e:
        raise TransportError("Cannot run {}: {}".format(command[0], e))
    except subprocess.TimeoutExpired:
        raise TransportError("{} timed out after {}s".format(command[0], timeout))
    return ProcessResult(command, completed.returncode, completed.stdout, completed.stderr)


class ConfigStore():
    """Where named config sets live."""

    def upload(self, config_dir, config_name):
        raise NotImplementedError

    def download(self, config_dir, config_name):
        raise NotImplementedError


class ZkCliConfigStore(ConfigStore):
    """ConfigStore backed by `zkcli.sh -cmd upconfig|downconfig`.

    Uploading a name that already exists overwrites it; downloading
    overwrites the local directory. Neither asks for confirmation.
    """

    def __init__(self, zk_host, zk_port=DEFAULT_ZK_PORT, zkcli='zkcli.sh', timeout=None):
        if not zk_host:
            raise ArgumentError("A ZooKeeper host is required")
        self.zk_host = zk_host
        self.zk_port = zk_port
        self.zkcli = zkcli
        self.timeout = timeout

    def zkhost(self):
        return '{}:{}'.format(self.zk_host, self.zk_port)

    def command(self, cmd, config_dir, config_name):
        if not config_name:
            raise ArgumentError("A config set name is required")
        return [self.zkcli, '-zkhost', self.zkhost(), '-cmd', cmd,
                '-confdir', config_dir, '-confname', config_name]

    def upload(self, config_dir, config_name):
        if not config_dir or not os.path.isdir(config_dir):
            raise ArgumentError("Config directory not found: {}".format(config_dir))
        command = self.command('upconfig', config_dir, config_name)
        logger.info("Uploading %s as %s to %s", config_dir, config_name, self.zkhost())
        return self._finish(run_command(command, self.timeout))

    def download(self, config_dir, config_name):
        if not config_dir:
            raise ArgumentError("A config directory is required")
        command = self.command('downconfig', config_dir, config_name)
        os.makedirs(config_dir, exist_ok=True)
        logger.info("Downloading %s from %s into %s", config_name, self.zkhost(), config_dir)
        return self._finish(run_command(command, self.timeout))

    def _finish(self, result):
        if not result.ok:
            logger.warning("%s exited with %d: %s", self.zkcli, result.returncode,
                           result.stderr.strip())
        return result
