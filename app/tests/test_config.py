from util.config import DEFAULT_CONFIG, DEFAULT_KEYMAP, load_config, seed_from


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "config.toml")
    assert cfg == DEFAULT_CONFIG
    assert cfg is not DEFAULT_CONFIG
    cfg["general"]["fps"] = 1
    assert DEFAULT_CONFIG["general"]["fps"] == 60


def test_partial_file_is_merged(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        "[general]\n"
        "instructions_per_frame = 15\n"
        'resolution = "etti"\n'
        "seed = 42\n"
        "\n"
        "[display]\n"
        "foreground = [51, 255, 102]\n"
        "\n"
        "[keyboard]\n"
        'C = "5"\n',
        encoding="utf-8",
    )
    cfg = load_config(path)

    assert cfg["general"]["instructions_per_frame"] == 15
    assert cfg["general"]["resolution"] == "etti"
    assert cfg["general"]["fps"] == 60
    assert cfg["display"]["foreground"] == [51, 255, 102]
    assert cfg["display"]["background"] == [0, 0, 0]
    assert cfg["keyboard"]["C"] == "5"
    assert cfg["keyboard"]["1"] == DEFAULT_KEYMAP["1"]
    assert seed_from(cfg) == 42


def test_invalid_values_fall_back_to_defaults(tmp_path):
    path = tmp_path / "config.toml"
    for body in (
        "[general]\nfps = 0\n",
        '[general]\nresolution = "superchip"\n',
        "[general]\nstrict = 1\n",
        "[display]\nbackground = [0, 0, 300]\n",
        '[keyboard]\nG = "g"\n',
        "[general\n",
    ):
        path.write_text(body, encoding="utf-8")
        assert load_config(path) == DEFAULT_CONFIG, body


def test_seed_from(tmp_path):
    cfg = load_config(tmp_path / "missing.toml")
    assert seed_from(cfg) is None
    cfg["general"]["seed"] = 0
    assert seed_from(cfg) == 0
