from backup_walker.entry_points import main

main()
