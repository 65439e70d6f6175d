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

import simplejson

from solrops.errors import ArgumentError

#
# Cluster description: nodes, collection names and the JSON profile
# operators keep next to the scripts (see sitecore.json)
#

DEFAULT_PORT = 8983
DEFAULT_ZK_PORT = 9983
DEFAULT_TIMEOUT = 30

VARIANT_SUFFIX = '_sec'

DEFAULT_COLLECTIONS = [
    'sitecore_testing_index',
    'sitecore_suggested_test_index',
    'sitecore_fxm_master_index',
    'sitecore_fxm_web_index',
    'sitecore_list_index',
    'sitecore_analytics_index',
    'sitecore_core_index',
    'sitecore_master_index',
    'sitecore_web_index',
]


def parse_port(value):
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ArgumentError("Invalid port: {!r}".format(value))
    if port <= 0 or port > 65535:
        raise ArgumentError("Port out of range: {}".format(port))
    return port


class ClusterNode():
    """A reachable cluster member."""

    def __init__(self, host, port=DEFAULT_PORT):
        if not host:
            raise ArgumentError("Cluster node needs a host")
        self.host = host
        self.port = parse_port(port)

    @classmethod
    def parse(cls, spec, default_port=DEFAULT_PORT):
        """Parses `host` or `host:port`."""
        if isinstance(spec, ClusterNode):
            return spec
        spec = (spec or '').strip()
        host, sep, port = spec.rpartition(':')
        if not sep:
            return cls(spec, default_port)
        return cls(host, port)

    def address(self):
        return '{}:{}'.format(self.host, self.port)

    def node_name(self):
        # live node names as registered by the cluster
        return '{}:{}_solr'.format(self.host, self.port)

    def __eq__(self, other):
        return (isinstance(other, ClusterNode)
                and (self.host, self.port) == (other.host, other.port))

    def __hash__(self):
        return hash((self.host, self.port))

    def __repr__(self):
        return 'ClusterNode({!r}, {})'.format(self.host, self.port)


def endpoint_port(endpoint):
    """Port of a `host:port` endpoint, or the default one."""
    if not endpoint:
        return DEFAULT_PORT
    hostport = endpoint.split('://', 1)[-1].split('/', 1)[0]
    host, sep, port = hostport.rpartition(':')
    if not sep:
        return DEFAULT_PORT
    return parse_port(port)


def parse_nodes(specs, default_port=DEFAULT_PORT):
    return [ClusterNode.parse(spec, default_port) for spec in specs]


def node_set(nodes):
    """Comma joined `host:port_solr` list, in the given order."""
    if not nodes:
        raise ArgumentError("At least one node is required")
    return ','.join(node.node_name() for node in nodes)


def expand_names(names, include_variants=False):
    """Each name followed by its `_sec` variant when enabled."""
    expanded = []
    for name in names:
        expanded.append(name)
        if include_variants:
            expanded.append(name + VARIANT_SUFFIX)
    return expanded


class ClusterConfig():
    """Settings for one cluster, usually read from a JSON profile."""

    KEYS = (
        'endpoint',
        'nodes',
        'zk_host',
        'zk_port',
        'config_name',
        'config_dir',
        'shards',
        'replicas',
        'collections',
        'variants',
        'timeout',
        'zkcli',
    )

    def __init__(self, **settings):
        self.endpoint = None
        self.nodes = []
        self.zk_host = None
        self.zk_port = DEFAULT_ZK_PORT
        self.config_name = None
        self.config_dir = None
        self.shards = 1
        self.replicas = None
        self.collections = None
        self.variants = False
        self.timeout = DEFAULT_TIMEOUT
        self.zkcli = 'zkcli.sh'
        self.update(**settings)

    def update(self, **overrides):
        """Applies every override that is not None."""
        for key, value in overrides.items():
            if key not in self.KEYS:
                raise ArgumentError("Unknown setting: {}".format(key))
            if value is not None:
                setattr(self, key, value)
        return self

    def cluster_nodes(self):
        return parse_nodes(self.nodes, endpoint_port(self.endpoint))


def load_config(config_file):
    """Reads a cluster profile such as solrops/sitecore.json."""
    try:
        with open(config_file, 'r') as f:
            settings = simplejson.load(f)
    except OSError as e:
        raise ArgumentError("Cannot read {}: {}".format(config_file, e))
    except simplejson.JSONDecodeError as e:
        raise ArgumentError("Malformed config {}: {}".format(config_file, e))
    if not isinstance(settings, dict):
        raise ArgumentError("Config {} must hold a JSON object".format(config_file))
    return ClusterConfig(**settings)
