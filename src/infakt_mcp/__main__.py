from infakt_mcp.server import main

main()
