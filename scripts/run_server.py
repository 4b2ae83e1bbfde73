import logging
import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from borderwait.common.config.manager import ConfigManager
from borderwait.common.logging import set_package_level, setup_logger
from borderwait.presentation.api import app, configure

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    cfg = ConfigManager.build(cfg)
    set_package_level("borderwait", getattr(logging, cfg.logging.level.upper(), logging.INFO))
    logger = setup_logger("borderwait.server")
    logger.info("Configuration loaded.")

    configure(cfg)

    server_cfg = cfg.server
    logger.info(f"Starting server at http://{server_cfg.host}:{server_cfg.port}")
    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)

if __name__ == "__main__":
    main()
