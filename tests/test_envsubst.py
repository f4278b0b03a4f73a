from ldfserver.utils import envsubst


def test_simple_strings():
    env = {'DATA_DIR': '/srv/ldf', 'NAME': 'dbpedia'}
    assert envsubst('${DATA_DIR}/dbpedia.ttl', env) == '/srv/ldf/dbpedia.ttl'
    assert envsubst('${DATA_DIR}/${NAME}.ttl', env) == '/srv/ldf/dbpedia.ttl'


def test_unknown_variable_name():
    assert envsubst('${DATA_DIR}/dbpedia.ttl', {}) == '${DATA_DIR}/dbpedia.ttl'


def test_non_strings_unchanged():
    assert envsubst(100, {}) == 100
    assert envsubst(None, {}) is None


def test_config_structure():
    env = {'BASE_URL': 'https://ldf.example.org', 'DATA_DIR': '/srv/ldf'}
    config = {
        'SERVER': {'BASE_URL': '${BASE_URL}', 'PAGE_SIZE': 100},
        'DATASOURCES': {
            'dbpedia': {'type': 'graph', 'settings': {'file': ['${DATA_DIR}/a.ttl', '${DATA_DIR}/b.ttl']}},
        },
    }
    assert envsubst(config, env) == {
        'SERVER': {'BASE_URL': 'https://ldf.example.org', 'PAGE_SIZE': 100},
        'DATASOURCES': {
            'dbpedia': {'type': 'graph', 'settings': {'file': ['/srv/ldf/a.ttl', '/srv/ldf/b.ttl']}},
        },
    }
