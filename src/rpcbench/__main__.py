from rpcbench.presentation.cli import main

main()
