from laravel_configurator.pipeline import main

main()
