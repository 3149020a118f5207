import pygame
import sys
from config import *
from renderer import SceneRenderer
from simulation import SimulationLoop

HELP_TEXT = "Space start/pause | R reset | Up/Down Z | Left/Right E | P paths | H histogram | T theory | Esc quit"


def handle_key(loop, key):
    """Map a key press to an engine command. Returns False to quit."""
    params = loop.params
    if key == pygame.K_ESCAPE:
        return False
    if key == pygame.K_SPACE:
        loop.toggle()
    elif key == pygame.K_r:
        loop.reset()
    elif key == pygame.K_UP:
        loop.configure(nuclear_charge=params.nuclear_charge + 1)
    elif key == pygame.K_DOWN:
        loop.configure(nuclear_charge=params.nuclear_charge - 1)
    elif key == pygame.K_RIGHT:
        loop.configure(alpha_energy=params.alpha_energy + 1)
    elif key == pygame.K_LEFT:
        loop.configure(alpha_energy=params.alpha_energy - 1)
    elif key == pygame.K_p:
        loop.configure(show_paths=not params.show_paths)
    elif key == pygame.K_h:
        loop.configure(show_histogram=not params.show_histogram)
    elif key == pygame.K_t:
        loop.configure(show_theory=not params.show_theory)
    return True


def main():
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT + 20))
    pygame.display.set_caption("Rutherford Alpha Particle Scattering")
    clock = pygame.time.Clock()

    # Simulation canvas is the top WIDTH x HEIGHT area; the strip below holds the key help
    canvas = screen.subsurface((0, 0, WIDTH, HEIGHT))
    renderer = SceneRenderer(canvas)
    loop = SimulationLoop(on_frame=renderer)

    font = pygame.font.SysFont("Consolas", 11)

    running = True
    while running:
        # 1. Event Handling
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                running = handle_key(loop, event.key)
                if not running:
                    break

        # 2. Simulation frame (draws itself while running)
        if loop.running:
            loop.tick(pygame.time.get_ticks())

        # 3. Status strip
        screen.fill((30, 30, 30), (0, HEIGHT, WIDTH, 20))
        status = "RUNNING" if loop.running else "STOPPED"
        screen.blit(font.render(f"[{status}] {HELP_TEXT}", True, (230, 230, 230)), (6, HEIGHT + 4))

        pygame.display.flip()
        clock.tick(FPS)

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
