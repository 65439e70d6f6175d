import pytest
import simplejson

from solrops.cluster import (DEFAULT_COLLECTIONS, ClusterConfig, ClusterNode,
                             endpoint_port, expand_names, load_config, node_set,
                             parse_nodes)
from solrops.errors import ArgumentError


def test_default_collections():
    assert len(DEFAULT_COLLECTIONS) == 9
    assert DEFAULT_COLLECTIONS[0] == 'sitecore_testing_index'
    assert DEFAULT_COLLECTIONS[-1] == 'sitecore_web_index'


def test_node_parse():
    assert ClusterNode.parse('10.0.0.2') == ClusterNode('10.0.0.2', 8983)
    assert ClusterNode.parse('10.0.0.2', 7574).port == 7574
    assert ClusterNode.parse('solr-3:8984') == ClusterNode('solr-3', 8984)
    assert ClusterNode.parse('solr-3:8984').node_name() == 'solr-3:8984_solr'


@pytest.mark.parametrize('spec', ['', 'host:', 'host:abc', 'host:70000'])
def test_node_parse_rejects(spec):
    with pytest.raises(ArgumentError):
        ClusterNode.parse(spec)


def test_node_set_keeps_order_without_trailing_comma():
    nodes = parse_nodes(['10.0.0.3', '10.0.0.1', '10.0.0.2'])
    assert node_set(nodes) == '10.0.0.3:8983_solr,10.0.0.1:8983_solr,10.0.0.2:8983_solr'
    assert node_set(nodes[:1]) == '10.0.0.3:8983_solr'


def test_node_set_empty():
    with pytest.raises(ArgumentError):
        node_set([])


def test_endpoint_port():
    assert endpoint_port('10.0.0.1:7574') == 7574
    assert endpoint_port('http://10.0.0.1:8984/solr') == 8984
    assert endpoint_port('solr.local') == 8983
    assert endpoint_port(None) == 8983


def test_expand_names():
    assert expand_names(['b', 'a']) == ['b', 'a']
    assert expand_names(['b', 'a'], True) == ['b', 'b_sec', 'a', 'a_sec']
    assert expand_names(['a', 'a'], True) == ['a', 'a_sec', 'a', 'a_sec']


def test_config_defaults_and_update():
    config = ClusterConfig()
    assert config.shards == 1
    assert config.timeout == 30
    config.update(shards=2, replicas=None)
    assert config.shards == 2
    assert config.replicas is None


def test_config_unknown_key():
    with pytest.raises(ArgumentError):
        ClusterConfig(shard=2)


def test_config_nodes_take_endpoint_port():
    config = ClusterConfig(endpoint='10.0.0.1:7574', nodes=['10.0.0.1', '10.0.0.2:8983'])
    assert config.cluster_nodes() == [ClusterNode('10.0.0.1', 7574),
                                      ClusterNode('10.0.0.2', 8983)]


def test_load_config(tmp_path):
    path = tmp_path / 'cluster.json'
    path.write_text(simplejson.dumps({'endpoint': 'solr:8983', 'nodes': ['a', 'b'],
                                      'variants': True}))
    config = load_config(str(path))
    assert config.endpoint == 'solr:8983'
    assert config.nodes == ['a', 'b']
    assert config.variants is True


def test_load_config_errors(tmp_path):
    with pytest.raises(ArgumentError):
        load_config(str(tmp_path / 'missing.json'))
    bad = tmp_path / 'bad.json'
    bad.write_text('{nope')
    with pytest.raises(ArgumentError):
        load_config(str(bad))
    listed = tmp_path / 'list.json'
    listed.write_text('[]')
    with pytest.raises(ArgumentError):
        load_config(str(listed))


def test_shipped_profile_loads():
    import os
    import solrops
    path = os.path.join(os.path.dirname(solrops.__file__), 'sitecore.json')
    config = load_config(path)
    assert config.config_name == 'sitecoreConf'
    assert len(config.cluster_nodes()) == 3
