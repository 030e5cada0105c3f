import pytest

from deflation_tools import DEFAULT_CONFIG, Operations


def test_missing_file_gives_defaults(tmp_path):
    settings = Operations().read_config_file(str(tmp_path / "absent.ini"))
    assert settings == DEFAULT_CONFIG
    # Defaults are copied, not shared
    settings['kite_color'][0] = 0
    assert DEFAULT_CONFIG['kite_color'][0] == 255


def test_round_trip(tmp_path):
    op = Operations()
    path = str(tmp_path / "config.ini")
    settings = dict(DEFAULT_CONFIG, width=640, height=480, generations=5,
                    dart_color=[10, 20, 30])
    op.write_config_file(path, settings)
    assert op.read_config_file(path) == settings


def test_partial_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Settings]\ngenerations = 3\nstroke_color = (1, 2, 3)\n")
    settings = Operations().read_config_file(str(path))
    assert settings['generations'] == 3
    assert settings['stroke_color'] == [1, 2, 3]
    assert settings['width'] == 960
    assert settings['kite_color'] == [255, 200, 0]


def test_colors_are_clamped(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Settings]\nbackground = 300, -5, 128\n")
    assert Operations().read_config_file(str(path))['background'] == [255, 0, 128]


def test_malformed_color_is_rejected(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Settings]\nkite_color = 1, 2\n")
    with pytest.raises(ValueError):
        Operations().read_config_file(str(path))


def test_malformed_integer_is_rejected(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Settings]\ngenerations = many\n")
    with pytest.raises(ValueError):
        Operations().read_config_file(str(path))


def test_rereading_does_not_leak_previous_file(tmp_path):
    op = Operations()
    first = tmp_path / "first.ini"
    first.write_text("[Settings]\nwidth = 100\n")
    second = tmp_path / "second.ini"
    second.write_text("[Settings]\nheight = 100\n")
    op.read_config_file(str(first))
    assert op.read_config_file(str(second))['width'] == 960
