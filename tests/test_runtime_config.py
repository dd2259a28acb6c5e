import pathlib
import tempfile
import unittest

from csiscope.config.runtime import CsiScopeConfig, config_from_mapping, load_config


class RuntimeConfigTest(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg = load_config(pathlib.Path(tmpdir) / "missing.yaml")

        self.assertEqual(cfg, CsiScopeConfig())
        self.assertEqual(cfg.history_capacity, 100)
        self.assertEqual(cfg.channel_capacity, 100)
        self.assertEqual(cfg.executable, "esp-csi-cli-rs")
        self.assertEqual(cfg.port, "/dev/ttyUSB0")

    def test_load_yaml_with_sections(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "csiscope.yaml"
            path.write_text(
                "source:\n"
                "  port: /dev/ttyACM0\n"
                "  extra_args: ['--baud', '921600']\n"
                "display:\n"
                "  frame_interval_ms: 50\n"
                "history_capacity: 32\n"
                "decode_policy: abort_line\n"
                "unknown_key: 1\n",
                encoding="utf-8",
            )

            cfg = load_config(path)

        self.assertEqual(cfg.port, "/dev/ttyACM0")
        self.assertEqual(cfg.extra_args, ("--baud", "921600"))
        self.assertEqual(cfg.frame_interval_ms, 50)
        self.assertEqual(cfg.history_capacity, 32)
        self.assertEqual(cfg.decode_policy, "abort_line")

    def test_non_mapping_yaml_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "list.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")

            with self.assertRaises(ValueError):
                load_config(path)

    def test_sanitized_clamps_values(self):
        cfg = config_from_mapping(
            {"history_capacity": 0, "channel_capacity": -5, "frame_interval_ms": 0}
        )
        self.assertEqual(cfg.history_capacity, 1)
        self.assertEqual(cfg.channel_capacity, 1)
        self.assertEqual(cfg.frame_interval_ms, 1)

    def test_unknown_policy_is_rejected(self):
        with self.assertRaises(ValueError):
            config_from_mapping({"decode_policy": "strict"})

    def test_with_overrides_ignores_none(self):
        cfg = CsiScopeConfig().with_overrides(port=None, history_capacity=10, simulate=True)
        self.assertEqual(cfg.port, "/dev/ttyUSB0")
        self.assertEqual(cfg.history_capacity, 10)
        self.assertTrue(cfg.simulate)


if __name__ == "__main__":
    unittest.main()
