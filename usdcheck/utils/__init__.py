# usdcheck utils module
