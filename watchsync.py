from cli.main import watchsync_cli


if __name__ == '__main__':
    watchsync_cli()
