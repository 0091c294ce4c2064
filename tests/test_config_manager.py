import json

import pytest

from equi2cube.config.config_manager import ConfigManager


@pytest.fixture
def manager(tmp_path):
    return ConfigManager(config_dir=tmp_path / 'configs')


def valid_config(manager, **overrides):
    config = manager.get_default_config()
    config.update(input_path='pano.jpg', output_dir='out')
    config.update(overrides)
    return config


def test_default_config_values(manager):
    config = manager.get_default_config()
    assert config['face_size'] == 512
    assert config['interpolation'] == 'linear'
    assert config['output_format'] == 'png'
    assert config['layout'] == 'separate'
    assert config['rotate'] is False


def test_save_and_load_named_config(manager):
    config = {'face_size': 1024, 'interpolation': 'nearest'}
    assert manager.save_config(config, config_name='hq')

    path = manager.config_dir / 'hq.json'
    data = json.loads(path.read_text(encoding='utf-8'))
    assert data['metadata']['config_name'] == 'hq'
    assert data['pipeline_config'] == config

    assert manager.load_config(path) == config
    assert manager.current_config == config


def test_load_bare_dict(manager, tmp_path):
    path = tmp_path / 'bare.json'
    path.write_text(json.dumps({'face_size': 64}), encoding='utf-8')
    assert manager.load_config(path) == {'face_size': 64}


def test_load_failures_return_none(manager, tmp_path):
    assert manager.load_config(tmp_path / 'missing.json') is None
    broken = tmp_path / 'broken.json'
    broken.write_text('{not json', encoding='utf-8')
    assert manager.load_config(broken) is None
    listed = tmp_path / 'list.json'
    listed.write_text('[1, 2]', encoding='utf-8')
    assert manager.load_config(listed) is None
    payload = tmp_path / 'payload.json'
    payload.write_text(json.dumps({'pipeline_config': 'face_size=8'}), encoding='utf-8')
    assert manager.load_config(payload) is None


def test_list_and_delete_configs(manager):
    assert manager.list_saved_configs() == []
    manager.save_config({'face_size': 8}, config_name='first')
    manager.save_config({'face_size': 16}, config_name='second')

    names = sorted(name for _, name, _ in manager.list_saved_configs())
    assert names == ['first', 'second']

    assert manager.delete_config(manager.config_dir / 'first.json')
    assert not manager.delete_config(manager.config_dir / 'first.json')
    assert [name for _, name, _ in manager.list_saved_configs()] == ['second']


def test_valid_config(manager):
    assert manager.validate_config(valid_config(manager)) == (True, [])


@pytest.mark.parametrize('overrides, fragment', [
    ({'input_path': ''}, 'Input path'),
    ({'output_dir': ''}, 'Output directory'),
    ({'face_size': 0}, 'Face size'),
    ({'face_size': True}, 'Face size'),
    ({'face_size': 12.0}, 'Face size'),
    ({'interpolation': 'cubic'}, 'Interpolation'),
    ({'output_format': 'bmp'}, 'Output format'),
    ({'layout': 'diamond'}, 'Layout'),
    ({'workers': 0}, 'Worker count'),
])
def test_invalid_config(manager, overrides, fragment):
    is_valid, errors = manager.validate_config(valid_config(manager, **overrides))
    assert not is_valid
    assert len(errors) == 1
    assert fragment in errors[0]
