from chaincfg.utils.defaults import DEFAULT_CONFIG
from chaincfg.utils.hardhat import render_hardhat_config, write_hardhat_config

EXPECTED_DEFAULT_HARDHAT_CONFIG = """\
require("@nomicfoundation/hardhat-toolbox");

/** @type import('hardhat/config').HardhatUserConfig */
module.exports = {
  solidity: "0.8.18",
  networks: {
    hardhat: {
      chainId: 1337,
    },
    sepolia: {
      url: `https://sepolia.infura.io/v3/${process.env.INFURA_API_KEY}`,
      accounts: [process.env.SEPOLIA_PRIVATE_KEY],
    },
  },
};
"""


def test_render_default_config():
    assert render_hardhat_config(DEFAULT_CONFIG) == EXPECTED_DEFAULT_HARDHAT_CONFIG


def test_render_solidity_settings():
    config = {
        "solidity": {
            "version": "0.8.18",
            "settings": {"optimizer": {"enabled": True, "runs": 200}},
        },
        "networks": {},
    }
    rendered = render_hardhat_config(config)
    assert "    settings: {\n      optimizer: {\n        enabled: true,\n" in rendered
    assert "        runs: 200,\n" in rendered
    assert "  networks: {},\n" in rendered


def test_render_escapes_template_text():
    config = {
        "solidity": "0.8.18",
        "networks": {
            "my-net": {"url": "https://rpc.example/`$x`/${RPC_KEY}"},
        },
    }
    rendered = render_hardhat_config(config)
    assert '"my-net": {' in rendered
    assert "url: `https://rpc.example/\\`\\$x\\`/${process.env.RPC_KEY}`," in rendered


def test_write_hardhat_config(tmp_path, secrets_env):
    path = tmp_path / "out" / "hardhat.config.js"
    write_hardhat_config(DEFAULT_CONFIG, str(path))

    written = path.read_text()
    assert written == EXPECTED_DEFAULT_HARDHAT_CONFIG
    # secrets in env must never reach the file
    assert "0123456789abcdef" not in written
