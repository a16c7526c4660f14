"""
Entry-point.  Keeps top-level script tiny.
"""
import logging
import pygame
from sweepscope import config, gui

def main():
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    pygame.init()
    cfg = config.load()
    app = gui.RadarGUI(cfg)
    app.run()
    config.save(cfg)
    pygame.quit()

if __name__ == "__main__":
    main()
