"""
Neon Swing
==========

Endless side-scrolling rope swing game.

The swing_core package holds the simulation: Verlet physics with a rope
constraint, procedural anchors, camera, scoring and the game state machine.
Rendering, input and high score storage are thin adapters around it.

All tunable parameters are in game_config.yaml.
"""
