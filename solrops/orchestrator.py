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

from solrops import admin
from solrops.cluster import (DEFAULT_COLLECTIONS, endpoint_port, expand_names,
                             node_set, parse_nodes)
from solrops.errors import ArgumentError

#
# Bulk collection lifecycle: every configured name is attempted in order,
# whatever happened to the previous one
#

logger = logging.getLogger(__name__)


def positive_int(value, what):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ArgumentError("{} must be a positive integer, got {!r}".format(what, value))
    return value


def collection_names(result):
    """Names listed in a LIST response, or None if there is no usable list."""
    if result.error is not None or not isinstance(result.payload, dict):
        return None
    names = result.payload.get('collections')
    if not isinstance(names, list):
        return None
    return names


class Orchestrator():
    """Drives create / delete / reload runs through a CollectionsClient."""

    def __init__(self, client):
        self.client = client

    def _names(self, names):
        if names is None:
            return list(DEFAULT_COLLECTIONS)
        if isinstance(names, str):
            raise ArgumentError("Collection names must be a list, got {!r}".format(names))
        names = list(names)
        if not names:
            raise ArgumentError("At least one collection name is required")
        if any(not name for name in names):
            raise ArgumentError("Collection names must be non-empty")
        return names

    def _run(self, batch):
        results = []
        for request in batch:
            result = self.client.execute(request)
            if result.ok:
                logger.info("%s %s: ok", result.action, result.name)
            else:
                logger.warning("%s %s: %s", result.action, result.name, result.summary())
            results.append(result)
        return results

    def create_collections(self, config_name, nodes, shard_count=1,
                           replica_count=None, names=None, include_variants=False):
        if not config_name:
            raise ArgumentError("A config set name is required")
        if isinstance(nodes, str):
            raise ArgumentError("Nodes must be a list, got {!r}".format(nodes))
        nodes = parse_nodes(nodes or [], endpoint_port(self.client.endpoint))
        nodes_csv = node_set(nodes)
        positive_int(shard_count, 'shard count')
        if replica_count is None:
            replica_count = len(nodes)
        positive_int(replica_count, 'replica count')
        names = self._names(names)

        # build everything up front so a bad name fails before any call
        batch = [
            admin.create_request(name, shard_count, replica_count, nodes_csv,
                                 config_name).validate()
            for name in expand_names(names, include_variants)
        ]
        logger.info("Creating %d collections on %s", len(batch), nodes_csv)
        return self._run(batch)

    def delete_collections(self, names=None, include_variants=False):
        names = self._names(names)
        batch = [admin.delete_request(name).validate()
                    for name in expand_names(names, include_variants)]
        logger.info("Deleting %d collections", len(batch))
        return self._run(batch)

    def list_collections(self):
        return self.client.execute(admin.list_request())

    def reload_all_collections(self):
        """LIST result first, then one RELOAD result per listed collection."""
        listing = self.list_collections()
        names = collection_names(listing)
        if names is None:
            logger.error("Cannot reload, collection list unavailable: %s",
                         listing.summary())
            return [listing]
        if not names:
            logger.info("No collections to reload")
            return [listing]
        logger.info("Reloading %d collections", len(names))
        return [listing] + self._run(admin.reload_request(name) for name in names)
