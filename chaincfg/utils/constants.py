import time

DIGEST_DIR = "digest"
START_TIME = time.time()
START_TIME_INT = int(START_TIME)
LOGS_PATH = f"{DIGEST_DIR}/{START_TIME_INT}/logs.txt"
DEFAULT_CONFIG_PATH = "chaincfg.yaml"
DEFAULT_HARDHAT_CONFIG_PATH = "hardhat.config.js"
CONFIG_EXTENSIONS = (".json", ".yaml", ".yml")

HARDHAT_NETWORK_NAME = "hardhat"
HARDHAT_CHAIN_ID = 1337
HARDHAT_TOOLBOX_PLUGIN = "@nomicfoundation/hardhat-toolbox"

SOLC_BIN_URL = "https://binaries.soliditylang.org"

REQUEST_TIMEOUT_SEC = 30
