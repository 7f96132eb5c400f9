"""
Run a CHIP-8 ROM in a pygame window, or headless.

    python main.py rom=roms/IBM.ch8
    python main.py rom=roms/test.ch8 headless_frames=600 quirks.shift_uses_vy=true
"""

import hydra
from omegaconf import DictConfig, OmegaConf

from chipvm.config import EmulatorConfig
from chipvm.logging import EmulatorLogger
from chipvm.machine import Machine
from chipvm.rendering import display_to_ascii


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    cfg = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
    config = EmulatorConfig.from_dict(cfg)
    logger = EmulatorLogger(log_level=config.log_level)
    logger.log_run_start(cfg)

    if config.headless_frames > 0:
        machine = Machine(config, logger=logger)
        machine.load_file(config.rom)
        machine.run_headless(config.headless_frames)
        logger.info(f"Executed {machine.instruction_count} instructions")
        print(display_to_ascii(machine.state.display))
        return

    # pygame is only needed for interactive runs
    from chipvm.frontend import PygameFrontend

    frontend = PygameFrontend(config.scale, config.color_scheme)
    machine = Machine(config, input_device=frontend, renderer=frontend, audio=frontend, logger=logger)
    try:
        machine.load_file(config.rom)
        machine.run()
    finally:
        frontend.close()
    logger.info(f"Stopped after {machine.frame_count} frames, {machine.instruction_count} instructions")


if __name__ == "__main__":
    main()
