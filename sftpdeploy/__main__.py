from sftpdeploy.cli import main

main()
