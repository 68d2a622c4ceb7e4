"""
arch_setup – interactive provisioning for Arch Linux workstations.

Installs packages through pacman, yay and flatpak, pulls dotfiles and
config files, and offers a search-and-install screen over all three
package sources.
"""

__version__ = "1.0.0"
