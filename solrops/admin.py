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

import requests
import simplejson

from solrops.cluster import DEFAULT_TIMEOUT
from solrops.errors import ArgumentError

#
# Collections API requests and the client that sends them
#

logger = logging.getLogger(__name__)

CREATE = 'CREATE'
DELETE = 'DELETE'
RELOAD = 'RELOAD'
LIST = 'LIST'

REQUIRED_PARAMS = {
    CREATE: ('name', 'numShards', 'replicationFactor', 'createNodeSet',
             'collection.configName'),
    DELETE: ('name',),
    RELOAD: ('name',),
    LIST: (),
}


class AdminRequest():
    """One Collections API call: an action plus its query parameters."""

    def __init__(self, action, **params):
        self.action = action
        self.fields = []
        for key, value in params.items():
            self.set(key, value)

    def set(self, key, value):
        # keeps insertion order, last write wins
        self.fields = [(k, v) for k, v in self.fields if k != key]
        self.fields.append((key, value))
        return self

    def get(self, key):
        for k, v in self.fields:
            if k == key:
                return v
        return None

    @property
    def name(self):
        return self.get('name')

    def validate(self):
        if self.action not in REQUIRED_PARAMS:
            raise ArgumentError("Unknown action: {!r}".format(self.action))
        missing = [key for key in REQUIRED_PARAMS[self.action]
                   if self.get(key) is None or self.get(key) == '']
        if missing:
            raise ArgumentError("{} request missing {}".format(
                self.action, ', '.join(missing)))
        return self

    def params(self):
        self.validate()
        return [('action', self.action)] + \
            [(k, str(v)) for k, v in self.fields] + [('wt', 'json')]

    def url(self, base_url):
        prepared = requests.Request(
            'GET', admin_url(base_url), params=self.params()).prepare()
        return prepared.url

    def __repr__(self):
        return 'AdminRequest({}, {})'.format(self.action, dict(self.fields))


def create_request(name, shard_count, replica_count, nodes, config_name):
    return AdminRequest(CREATE,
                        name=name,
                        numShards=shard_count,
                        replicationFactor=replica_count,
                        createNodeSet=nodes,
                        **{'collection.configName': config_name})


def delete_request(name):
    return AdminRequest(DELETE, name=name)


def reload_request(name):
    return AdminRequest(RELOAD, name=name)


def list_request():
    return AdminRequest(LIST)


class AdminResult():
    """Outcome of one dispatched request, kept as the cluster answered it."""

    def __init__(self, action, name=None, url=None, status_code=None,
                 payload=None, error=None):
        self.action = action
        self.name = name
        self.url = url
        self.status_code = status_code
        self.payload = payload
        self.error = error

    @property
    def ok(self):
        if self.error is not None or not isinstance(self.payload, dict):
            return False
        header = self.payload.get('responseHeader') or {}
        return header.get('status') == 0

    def summary(self):
        if self.error is not None:
            return 'error: {}'.format(self.error)
        if self.ok:
            return 'ok'
        failure = self.payload.get('error') if isinstance(self.payload, dict) else None
        if isinstance(failure, dict) and failure.get('msg'):
            return 'failed ({}): {}'.format(self.status_code, failure['msg'])
        return 'failed ({})'.format(self.status_code)

    def to_dict(self):
        return {
            'action': self.action,
            'name': self.name,
            'url': self.url,
            'status_code': self.status_code,
            'payload': self.payload,
            'error': self.error,
        }

    def __repr__(self):
        return 'AdminResult({} {}: {})'.format(
            self.action, self.name, self.summary())


def base_url(endpoint):
    """`host:port` or a full URL, normalised to the Solr web context."""
    if not endpoint or not endpoint.strip():
        raise ArgumentError("A cluster endpoint is required")
    endpoint = endpoint.strip().rstrip('/')
    if '://' not in endpoint:
        endpoint = 'http://' + endpoint
    rest = endpoint.split('://', 1)[1]
    if '/' not in rest:
        endpoint += '/solr'
    return endpoint


def admin_url(base):
    return base + '/admin/collections'


class CollectionsClient():
    """Sends AdminRequests to one cluster member, one at a time."""

    def __init__(self, endpoint, timeout=DEFAULT_TIMEOUT, session=None):
        self.endpoint = endpoint
        self.base_url = base_url(endpoint)
        self.timeout = timeout
        self.session = session or requests.Session()

    def execute(self, request):
        """Dispatches one request; transport failures end up in the result."""
        params = request.params()
        url = admin_url(self.base_url)
        result = AdminResult(request.action, request.name, request.url(self.base_url))
        logger.debug("GET %s", result.url)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("%s %s: %s", request.action, request.name or '', e)
            result.error = str(e)
            return result

        result.status_code = response.status_code
        try:
            result.payload = simplejson.loads(response.text)
        except simplejson.JSONDecodeError as e:
            result.payload = response.text
            result.error = "Malformed response: {}".format(e)
        return result

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
