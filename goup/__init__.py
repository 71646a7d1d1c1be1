"""
goup - Go toolchain version manager.

Installs released Go toolchains from the official download host, builds
Go tip (or a pending CL) from source, and switches the default version by
repointing the ``current`` symlink.
"""
