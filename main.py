"""Entry point for running the healthcheck probe, e.g. from a Docker HEALTHCHECK."""

from healthprobe.runner import main

if __name__ == "__main__":
    main()
