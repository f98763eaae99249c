from cognigy_function_call.cli import main

main()
