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

import argparse
import logging
import sys

import simplejson

from solrops.admin import CollectionsClient
from solrops.cluster import ClusterConfig, load_config
from solrops.errors import ArgumentError, TransportError
from solrops.orchestrator import Orchestrator
from solrops.zkconfig import ZkCliConfigStore

#
# solrops push-config | pull-config | reload-all | list-collections |
#         create-collections | delete-collections
#

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TRANSPORT = 1
EXIT_USAGE = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog='solrops',
        description="Administrative tasks for a SolrCloud cluster and its ZooKeeper config store.")
    parser.add_argument('--config', help="JSON cluster profile (see solrops/sitecore.json)")
    parser.add_argument('--timeout', type=float, help="Seconds to wait for each HTTP request")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    sub = parser.add_subparsers(dest='command', metavar='command')
    sub.required = True

    def endpoint(p):
        p.add_argument('--endpoint', help="host:port of any cluster member")

    def zk(p):
        p.add_argument('--confdir', dest='config_dir', help="Local config set directory")
        p.add_argument('--confname', dest='config_name', help="Config set name in ZooKeeper")
        p.add_argument('--zk-host', dest='zk_host')
        p.add_argument('--zk-port', dest='zk_port', type=int)
        p.add_argument('--zkcli', help="Path to zkcli.sh")

    def names(p):
        p.add_argument('--collection', dest='collections', action='append',
                       help="Collection name, repeatable (default: built-in sitecore set)")
        p.add_argument('--variants', action='store_true', default=None,
                       help="Also act on each <name>_sec collection")
        p.add_argument('--no-variants', dest='variants', action='store_false', default=None,
                       help="Skip the _sec collections even if the profile enables them")

    zk(sub.add_parser('push-config', help="Upload a config set to ZooKeeper"))
    zk(sub.add_parser('pull-config', help="Download a config set from ZooKeeper"))
    endpoint(sub.add_parser('reload-all', help="Reload every collection in the cluster"))
    endpoint(sub.add_parser('list-collections', help="List collections in the cluster"))

    create = sub.add_parser('create-collections', help="Create the configured collections")
    endpoint(create)
    create.add_argument('--confname', dest='config_name', help="Config set to create with")
    create.add_argument('--node', dest='nodes', action='append',
                        help="host[:port] hosting replicas, repeatable")
    create.add_argument('--shards', type=int)
    create.add_argument('--replicas', type=int, help="Default: number of nodes")
    names(create)

    delete = sub.add_parser('delete-collections', help="Delete the configured collections")
    endpoint(delete)
    names(delete)
    return parser


def resolve_config(args):
    config = load_config(args.config) if args.config else ClusterConfig()
    overrides = {key: getattr(args, key, None) for key in ClusterConfig.KEYS}
    return config.update(**overrides)


def require(value, flag):
    if value is None or value == '' or value == []:
        raise ArgumentError("Missing required value: {}".format(flag))
    return value


def label(result):
    if result.name is None:
        return result.action
    return '{} {}'.format(result.action, result.name)


def report(results):
    for result in results:
        print('{} -> {}'.format(label(result), result.summary()))
        if result.payload is not None:
            print(simplejson.dumps(result.payload))


def report_process(result):
    if result.stdout:
        print(result.stdout.rstrip())
    if result.stderr:
        print(result.stderr.rstrip(), file=sys.stderr)


def collections_client(config):
    return CollectionsClient(require(config.endpoint, '--endpoint'), timeout=config.timeout)


def config_store(config):
    return ZkCliConfigStore(require(config.zk_host, '--zk-host'), config.zk_port,
                            zkcli=config.zkcli)


def push_config(config):
    result = config_store(config).upload(require(config.config_dir, '--confdir'),
                                         require(config.config_name, '--confname'))
    report_process(result)
    return result.returncode


def pull_config(config):
    result = config_store(config).download(require(config.config_dir, '--confdir'),
                                           require(config.config_name, '--confname'))
    report_process(result)
    return result.returncode


def reload_all(config):
    with collections_client(config) as client:
        report(Orchestrator(client).reload_all_collections())
    return EXIT_OK


def list_collections(config):
    with collections_client(config) as client:
        report([Orchestrator(client).list_collections()])
    return EXIT_OK


def create_collections(config):
    config_name = require(config.config_name, '--confname')
    with collections_client(config) as client:
        results = Orchestrator(client).create_collections(
            config_name,
            config.cluster_nodes(),
            shard_count=config.shards,
            replica_count=config.replicas,
            names=config.collections,
            include_variants=config.variants)
    report(results)
    return EXIT_OK


def delete_collections(config):
    with collections_client(config) as client:
        results = Orchestrator(client).delete_collections(
            names=config.collections, include_variants=config.variants)
    report(results)
    return EXIT_OK


COMMANDS = {
    'push-config': push_config,
    'pull-config': pull_config,
    'reload-all': reload_all,
    'list-collections': list_collections,
    'create-collections': create_collections,
    'delete-collections': delete_collections,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        return COMMANDS[args.command](resolve_config(args))
    except ArgumentError as e:
        print('solrops: error: {}'.format(e), file=sys.stderr)
        return EXIT_USAGE
    except TransportError as e:
        logger.error("%s", e)
        return EXIT_TRANSPORT


if __name__ == '__main__':
    sys.exit(main())
