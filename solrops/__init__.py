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

#
# Simple library for SolrCloud administration: config sets in ZooKeeper,
# bulk collection create / delete and cluster wide reloads
#

from solrops.admin import AdminRequest, AdminResult, CollectionsClient
from solrops.cluster import (DEFAULT_COLLECTIONS, ClusterConfig, ClusterNode,
                             expand_names, load_config, node_set)
from solrops.errors import ArgumentError, SolrOpsError, TransportError
from solrops.orchestrator import Orchestrator, collection_names
from solrops.zkconfig import ConfigStore, ProcessResult, ZkCliConfigStore

__version__ = '0.1.0'
